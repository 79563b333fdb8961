"""
Speaker panel — text input, read-aloud and TTS audio rendering.

Generation states: idle -> generating -> done | error
"""

import streamlit as st

from src.core.models import GenerationStatus
from src.ui.controller import SpeechController
from src.ui.utils import run_action


def render_speaker(controller: SpeechController) -> None:
    """Render the text-to-speech panel."""
    controller.text = st.text_area(
        "Text",
        value=controller.text,
        height=240,
        placeholder="Type the text to read aloud...",
        label_visibility="collapsed",
    )

    text_file = st.file_uploader("Load a .txt file", type=["txt"], key="tts_text_file")
    if text_file is not None and st.session_state.get("_loaded_text_file") != text_file.file_id:
        st.session_state._loaded_text_file = text_file.file_id
        if run_action(controller.load_text_file, text_file.name, text_file.getvalue()) is not None:
            st.rerun()

    col1, col2 = st.columns(2)
    with col1:
        if st.button("\U0001f50a Speak text", use_container_width=True, type="primary"):
            with st.spinner("Speaking..."):
                run_action(controller.speak)
    with col2:
        generating = controller.generation == GenerationStatus.generating
        label = "Generating..." if generating else "Generate audio"
        if st.button(label, use_container_width=True, disabled=generating):
            with st.spinner("Generating audio..."):
                run_action(controller.generate_audio)

    if controller.generated_audio is not None:
        st.audio(controller.generated_audio.data, format=controller.generated_audio.mime_type)
        name, data = controller.download_generated_audio()
        st.download_button(
            "⬇️ Download audio",
            data=data,
            file_name=name,
            mime=controller.generated_audio.mime_type,
            use_container_width=True,
        )
