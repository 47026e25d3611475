"""
CardioGraph – Streamlit application.

Provides the interactive page for:
    - Typing clinical cardiology text
    - Choosing the infographic format (horizontal, vertical, square)
    - Generating the infographic and previewing it
    - Downloading the image as a timestamped PNG

Launch with:
    python -m cardiograph app
    # or
    streamlit run cardiograph/dashboard/app.py
"""

import os
import sys

import streamlit as st
from dotenv import load_dotenv

# Add parent to path for standalone execution
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from cardiograph.config import AppConfig  # noqa: E402
from cardiograph.controller import (  # noqa: E402
    AspectRatioSelected,
    GenerationController,
    Status,
    Submitted,
    TextChanged,
)
from cardiograph.request_builder import AspectRatio  # noqa: E402

load_dotenv()

FORMAT_BUTTONS = [
    (AspectRatio.LANDSCAPE, "▭ Horizontal"),
    (AspectRatio.PORTRAIT, "▯ Vertical"),
    (AspectRatio.SQUARE, "□ Quadrado"),
]


def _config_path() -> str | None:
    """Return the path passed via --config / -c, or None."""
    argv = sys.argv[1:]
    for flag in ("--config", "-c"):
        if flag in argv:
            idx = argv.index(flag)
            if idx + 1 < len(argv):
                return argv[idx + 1]
    return None


def get_controller() -> GenerationController:
    """Return this session's controller, creating it on first load."""
    if "controller" not in st.session_state:
        path = _config_path()
        config = AppConfig.from_yaml(path) if path else AppConfig()
        st.session_state["controller"] = GenerationController(config=config)
    return st.session_state["controller"]


def select_format(ratio: AspectRatio) -> None:
    get_controller().dispatch(AspectRatioSelected(ratio))


st.set_page_config(
    page_title="CardioGraph AI",
    page_icon="❤️",
    layout="centered",
)

controller = get_controller()

st.title("❤️ CardioGraph AI")
st.markdown("Transforme textos clínicos em infográficos explicativos.")
st.divider()

text = st.text_area(
    "Texto Clínico ou Tópico (Cardiologia)",
    placeholder=(
        "Ex: Explique a diferença entre IAM com supradesnivelamento e sem "
        "supradesnivelamento do segmento ST..."
    ),
    height=180,
    key="input_text",
)
controller.dispatch(TextChanged(text))

st.markdown("**Formato do Infográfico**")
columns = st.columns(len(FORMAT_BUTTONS))
for column, (ratio, label) in zip(columns, FORMAT_BUTTONS):
    with column:
        st.button(
            label,
            key=f"format_{ratio.name.lower()}",
            type="primary" if controller.state.aspect_ratio is ratio else "secondary",
            on_click=select_format,
            args=(ratio,),
            width="stretch",
        )

submit = st.button(
    "Gerar Infográfico",
    type="primary",
    disabled=not controller.state.can_submit,
    width="stretch",
)

if submit:
    with st.spinner("Gerando Infográfico..."):
        controller.dispatch(Submitted())

state = controller.state

if state.error_message:
    st.error(state.error_message)

st.divider()

if state.status is Status.SUCCESS and state.result_image:
    st.subheader("Infográfico Gerado")
    download = controller.download()
    st.image(download.data, caption="Infográfico de Cardiologia", width="stretch")
    st.download_button(
        "Baixar Imagem",
        download.data,
        file_name=download.filename,
        mime=download.mime_type,
    )
else:
    st.info("🖼️ O infográfico gerado aparecerá aqui.")

st.markdown("---")
st.caption(
    "Baseado nas diretrizes de cardiologia. "
    "Verifique sempre as informações clínicas."
)
