"""
Recorder component — sends a recording or audio file to the relay.

States: idle -> processing -> completed
"""

import logging

import streamlit as st

from src.ui.controller import SpeechController
from src.ui.utils import current_client, run_action

logger = logging.getLogger(__name__)


def render_recorder(controller: SpeechController) -> None:
    """Render the transcription UI based on current session state."""
    status = st.session_state.transcribe_status

    if status == "idle":
        _render_idle(controller)
    elif status == "processing":
        _render_processing(controller)
    elif status == "completed":
        _render_completed(controller)


def _render_idle(controller: SpeechController) -> None:
    """Show the audio source choices and the transcribe button."""
    # Bumping the round gives fresh (empty) input widgets
    round_ = st.session_state.get("_transcribe_round", 0)
    audio = st.audio_input("Record audio", key=f"transcribe_mic_{round_}")
    uploaded = st.file_uploader(
        "...or choose an audio file",
        type=["wav", "mp3", "m4a", "ogg", "webm", "flac"],
        key=f"transcribe_file_{round_}",
    )

    chosen = audio if audio is not None else uploaded
    if chosen is not None:
        run_action(
            controller.select_audio_file,
            chosen.name or "recording.wav",
            chosen.getvalue(),
            chosen.type,
        )

    blob = controller.recorded_audio
    if blob is None:
        st.info("Record or choose an audio file to transcribe.")
        return

    st.audio(blob.data, format=blob.mime_type)
    st.caption(f"{blob.name} · {blob.size / 1024:.1f} KB")

    if st.button("\U0001f4dd Transcribe", type="primary"):
        st.session_state.transcribe_status = "processing"
        st.rerun()


def _render_processing(controller: SpeechController) -> None:
    """Upload the selected audio with a spinner."""
    with st.spinner("Transcribing audio..."):
        text = run_action(controller.transcribe_audio, current_client())

    if text is None:
        st.session_state.transcribe_status = "idle"
        return
    logger.info("Transcription received (%d chars)", len(text))
    st.session_state.transcribe_status = "completed"
    st.rerun()


def _render_completed(controller: SpeechController) -> None:
    """Show the transcript returned by the relay."""
    st.success("Transcription completed!")

    result = controller.transcription
    if result is not None and result.text:
        st.subheader("Transcript")
        st.code(result.text, language=None)
    else:
        st.info("No speech was recognized in this audio.")

    if controller.recorded_audio is not None:
        name, data = controller.download_recording()
        st.download_button(
            "⬇️ Download audio",
            data=data,
            file_name=name,
            mime=controller.recorded_audio.mime_type,
        )

    if st.button("New transcription"):
        controller.recorded_audio = None
        controller.transcription = None
        st.session_state._transcribe_round = st.session_state.get("_transcribe_round", 0) + 1
        st.session_state.transcribe_status = "idle"
        st.rerun()
