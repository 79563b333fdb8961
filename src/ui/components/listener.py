"""
Listener panel — live speech recognition and microphone recording.

States: idle -> listening -> idle, idle -> recording -> idle
"""

import streamlit as st

from src.ui.controller import SpeechController
from src.ui.utils import run_action

_PLACEHOLDER = "_Results will appear here..._"


def _set_listening(controller: SpeechController, listen: bool) -> None:
    # Acts on the state the button showed when it was rendered
    run_action(controller.start_listening if listen else controller.stop_listening)


def _set_recording(controller: SpeechController, record: bool) -> None:
    run_action(controller.start_recording if record else controller.stop_recording)


def render_listener(controller: SpeechController) -> None:
    """Render the speech-to-text panel.

    While listening, the script stays in the recognition loop and streams
    interim transcripts into a placeholder; clicking *Stop* reruns the
    script, which ends the loop and releases the microphone.
    """
    col1, col2 = st.columns(2)
    with col1:
        label = "\U0001f3a4 Stop" if controller.listening else "\U0001f3a4 Start talking"
        st.button(
            label,
            use_container_width=True,
            disabled=controller.recording,
            on_click=_set_listening,
            args=(controller, not controller.listening),
        )
    with col2:
        label = "⏹️ Stop recording" if controller.recording else "⏺️ Record audio"
        st.button(
            label,
            use_container_width=True,
            disabled=controller.listening,
            on_click=_set_recording,
            args=(controller, not controller.recording),
        )

    status = st.empty()
    transcript_box = st.empty()
    transcript_box.markdown(controller.transcript or _PLACEHOLDER)

    col3, col4 = st.columns(2)
    with col3:
        if st.button("\U0001f4cb Copy text", use_container_width=True, disabled=not controller.transcript):
            text = run_action(controller.copy_transcript)
            if text:
                st.code(text, language=None)
                st.toast("Use the copy icon to put the text on your clipboard")
    with col4:
        if controller.recorded_audio is not None:
            name, data = controller.download_recording()
            st.download_button(
                "⬇️ Download recording",
                data=data,
                file_name=name,
                mime=controller.recorded_audio.mime_type,
                use_container_width=True,
            )

    if controller.recorded_audio is not None:
        st.audio(controller.recorded_audio.data, format=controller.recorded_audio.mime_type)

    if controller.recording:
        status.info("Recording... click *Stop recording* to finish.")

    if controller.listening:
        status.info("Listening... speak now.")

        def _show(event) -> None:
            transcript_box.markdown(event.text or _PLACEHOLDER)

        def _tick() -> None:
            status.info("Listening... speak now.")

        if run_action(controller.listen, on_event=_show, on_tick=_tick) is not None:
            st.rerun()
        status.empty()
