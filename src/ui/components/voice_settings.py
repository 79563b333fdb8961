"""Voice settings panel — rate, pitch and voice selection."""

import streamlit as st

from src.ui.controller import SpeechController
from src.ui.utils import run_action


def render_voice_settings(controller: SpeechController) -> None:
    """Render sliders and the voice picker, writing back into the controller."""
    options = controller.options
    rate = st.slider("Rate", 0.5, 2.0, value=options.rate, step=0.1, format="%.1f")
    pitch = st.slider("Pitch", 0.5, 2.0, value=options.pitch, step=0.1, format="%.1f")

    if not controller.voices and controller.can_speak:
        run_action(controller.refresh_voices)

    voice_id = options.voice_id
    if controller.voices:
        ids = [voice.id for voice in controller.voices]
        labels = {voice.id: f"{voice.name} ({voice.lang})" if voice.lang else voice.name
                  for voice in controller.voices}
        voice_id = st.selectbox(
            "Voice",
            ids,
            index=ids.index(voice_id) if voice_id in ids else 0,
            format_func=labels.get,
        )
    else:
        st.selectbox("Voice", ["Loading voices..."], disabled=True)

    if (rate, pitch, voice_id) != (options.rate, options.pitch, options.voice_id):
        controller.update_options(rate=rate, pitch=pitch, voice_id=voice_id)
