"""
Entry point for running CardioGraph as a module: ``python -m cardiograph``

Supports two modes:
    1. Generate one infographic headlessly and save it as a PNG:
        python -m cardiograph generate "Diferença entre IAMCSST e IAMSSST" --aspect-ratio 16:9

    2. Launch the Streamlit app:
        python -m cardiograph app
"""

import argparse
import json
import sys

ASPECT_RATIO_CHOICES = ["1:1", "9:16", "16:9", "square", "portrait", "landscape"]


def build_parser() -> argparse.ArgumentParser:
    from cardiograph.generation import GeneratorRegistry

    backends = ", ".join(GeneratorRegistry.available())
    parser = argparse.ArgumentParser(
        prog="cardiograph",
        description="CardioGraph – clinical cardiology text to AI infographics",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── generate ────────────────────────────────────────────────────────
    gen_parser = subparsers.add_parser(
        "generate", help="Generate one infographic and save it as a PNG"
    )
    gen_parser.add_argument(
        "text",
        type=str,
        help="Clinical text or topic to illustrate",
    )
    gen_parser.add_argument(
        "--aspect-ratio",
        "-a",
        type=str,
        default=None,
        choices=ASPECT_RATIO_CHOICES,
        help="Infographic format (default: from config, 1:1)",
    )
    gen_parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a YAML configuration file",
    )
    gen_parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        default=None,
        help="Override the output directory from the config",
    )
    gen_parser.add_argument(
        "--generator",
        "-g",
        type=str,
        default=None,
        help=f"Image backend to use ({backends})",
    )

    # ── app ─────────────────────────────────────────────────────────────
    app_parser = subparsers.add_parser("app", help="Launch the Streamlit app")
    app_parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a YAML configuration file",
    )
    app_parser.add_argument(
        "--port",
        type=int,
        default=8501,
        help="Port for the Streamlit server",
    )

    return parser


def load_config(path=None, **overrides):
    """Load an :class:`AppConfig` from YAML (optional) and apply CLI overrides."""
    from cardiograph.config import AppConfig

    if path:
        config = AppConfig.from_yaml(path)
    else:
        config = AppConfig()

    generator = overrides.pop("generator", None)
    if generator and generator != config.generator:
        from cardiograph.config import resolve_api_key

        config.generator = generator
        config.api_key = resolve_api_key(generator)

    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config


def run_generate(args) -> int:
    """Run one generation and save the image. Returns the exit status."""
    from cardiograph.controller import GenerationController, Status
    from cardiograph.output.export import save_image

    config = load_config(
        args.config,
        generator=args.generator,
        output_dir=args.output_dir,
    )
    print(config.summary())

    controller = GenerationController(config=config)
    state = controller.generate(args.text, args.aspect_ratio)

    if state.status is not Status.SUCCESS:
        report = json.dumps(state.error.to_dict(), ensure_ascii=False)
        print(f"[CardioGraph] ERROR: {report}")
        return 1

    download = controller.download()
    save_image(download.data, config.output_dir, download.filename)
    return 0


def main():
    from dotenv import load_dotenv

    load_dotenv()  # Load .env file (GEMINI_API_KEY, etc.)

    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "generate":
        sys.exit(run_generate(args))

    elif args.command == "app":
        import os
        import subprocess

        app_path = os.path.join(os.path.dirname(__file__), "dashboard", "app.py")
        cmd = [
            sys.executable,
            "-m",
            "streamlit",
            "run",
            app_path,
            "--server.port",
            str(args.port),
        ]
        if args.config:
            cmd.extend(["--", "--config", args.config])
        subprocess.run(cmd)


if __name__ == "__main__":
    main()
