"""
CardioGraph Quick Start Example – Gemini Backend.

This script shows the minimal code needed to turn a clinical text into an
infographic without the Streamlit page.

Prerequisites:
    1. Install CardioGraph: ``pip install -e .``
    2. Set your Gemini API key: ``export GEMINI_API_KEY=...``

Usage:
    python examples/quickstart.py
"""

from dotenv import load_dotenv

from cardiograph import AppConfig, GenerationController, Status
from cardiograph.output.export import save_image


def main():
    load_dotenv()

    config = AppConfig.from_yaml("examples/config.yaml")
    print(config.summary())

    controller = GenerationController(config=config)
    state = controller.generate(
        "Explique a diferença entre IAM com supradesnivelamento e sem "
        "supradesnivelamento do segmento ST.",
        "16:9",
    )

    if state.status is not Status.SUCCESS:
        print(f"Falhou: {state.error_message}")
        return

    download = controller.download()
    save_image(download.data, config.output_dir, download.filename)


if __name__ == "__main__":
    main()
