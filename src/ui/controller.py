"""
Speech controller — the UI's actions and state, independent of Streamlit.

One ``SpeechController`` lives in each Streamlit session. It owns the engine
handles it was given (synthesizer, recognition engine, audio capture) and
drives three small state machines:

    recording:   idle -> recording -> idle        (toggle)
    listening:   idle -> listening -> idle        (toggle)
    generation:  idle -> generating -> done|error (one-shot)

Every action raises a ``SuaraError`` (or ``APIError`` from the relay client)
on failure after returning its state machine to idle; the UI shows the
message as an alert.
"""

import logging
from collections.abc import Callable

from src.core.config import get_settings
from src.core.exceptions import BadRequestError, EmptyInputError, ExternalServiceError
from src.core.models import (
    AudioBlob,
    GenerationStatus,
    SpeechOptions,
    TranscriptEvent,
    TranscriptionResult,
    VoiceProfile,
)
from src.services.audio.capture import select_file
from src.services.speech.capability import (
    Available,
    Capability,
    Unavailable,
    detect_recognition,
    detect_recording,
    detect_synthesis,
    require,
)
from src.services.speech.recognition import NO_SPEECH, RecognitionSession
from src.services.speech.synthesis import pick_default_voice
from src.ui.api_client import APIClient, APIError

logger = logging.getLogger(__name__)


class SpeechController:
    """Owns speech engine handles and the state rendered by the UI.

    Args:
        synthesis: Capability wrapping a ``SpeechSynthesizer``.
        recognition: Capability wrapping a ``RecognitionEngine``.
        recording: Capability wrapping an ``AudioCapture``.
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        synthesis: Capability,
        recognition: Capability,
        recording: Capability,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._synthesis = synthesis
        self._recognition = recognition
        self._recording = recording
        self._session: RecognitionSession | None = None

        self.text = ""
        self.transcript = ""
        self.listening = False
        self.recording = False
        self.generation = GenerationStatus.idle
        self.generated_audio: AudioBlob | None = None
        self.recorded_audio: AudioBlob | None = None
        self.transcription: TranscriptionResult | None = None
        self.voices: list[VoiceProfile] = []
        self.options = SpeechOptions(language=self._settings.speech_language)

    @classmethod
    def detect(cls, settings=None) -> "SpeechController":
        """Build a controller from the engines available on this machine."""
        settings = settings or get_settings()
        return cls(
            synthesis=detect_synthesis(settings),
            recognition=detect_recognition(settings),
            recording=detect_recording(settings),
            settings=settings,
        )

    # -- voices --

    def refresh_voices(self) -> list[VoiceProfile]:
        """Reload the voice list and pick a default voice if none is selected."""
        synthesizer = require(self._synthesis, "Speech synthesis")
        self.voices = synthesizer.list_voices()
        known = {voice.id for voice in self.voices}
        if self.options.voice_id not in known:
            default = pick_default_voice(self.voices, self.options.language)
            self.options = self.options.model_copy(
                update={"voice_id": default.id if default else None}
            )
        return self.voices

    def update_options(self, **changes) -> None:
        """Change rate, pitch or voice (validated against SpeechOptions bounds)."""
        self.options = SpeechOptions(**{**self.options.model_dump(), **changes})

    # -- text to speech --

    def speak(self, text: str | None = None) -> None:
        """Read ``text`` (or the text box) aloud once."""
        text = self.text if text is None else text
        if not text.strip():
            raise EmptyInputError("Enter some text to read aloud")
        synthesizer = require(self._synthesis, "Speech synthesis")
        synthesizer.stop()
        synthesizer.speak(text, self.options)

    def generate_audio(self) -> AudioBlob:
        """Render the text box to a WAV file for playback and download."""
        if not self.text.strip():
            raise EmptyInputError("Enter some text to read aloud")
        synthesizer = require(self._synthesis, "Speech synthesis")
        self.generation = GenerationStatus.generating
        try:
            blob = synthesizer.synthesize(self.text, self.options)
        except Exception:
            self.generation = GenerationStatus.error
            raise
        self.generated_audio = blob
        self.generation = GenerationStatus.done
        return blob

    def load_text_file(self, name: str, data: bytes) -> str:
        """Load a plain-text file into the text box."""
        try:
            self.text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BadRequestError(f"{name} is not a UTF-8 text file") from exc
        return self.text

    # -- speech recognition --

    def start_listening(self) -> RecognitionSession:
        """Start a new recognition session; the previous one must be stopped."""
        if self.listening and self._session is not None:
            return self._session
        engine = require(self._recognition, "Speech recognition")
        session = RecognitionSession(
            engine,
            continuous=self._settings.recognition_continuous,
            interim_results=self._settings.recognition_interim_results,
            listen_timeout=self._settings.recognition_listen_timeout,
            phrase_time_limit=self._settings.recognition_phrase_time_limit,
        )
        session.start()
        self._session = session
        self.listening = True
        logger.info("Listening started (%s)", self.options.language)
        return session

    def stop_listening(self) -> None:
        """Stop the active session and release the microphone."""
        session, self._session = self._session, None
        self.listening = False
        if session is not None:
            session.stop()
            logger.info("Listening stopped")

    def toggle_listening(self) -> bool:
        """Start or stop listening; returns the new ``listening`` flag."""
        if self.listening:
            self.stop_listening()
        else:
            self.start_listening()
        return self.listening

    def listen(
        self,
        on_event: Callable[[TranscriptEvent], None] | None = None,
        on_tick: Callable[[], None] | None = None,
        poll: float = 0.5,
    ) -> str:
        """Consume the active session, updating the transcript as events arrive.

        ``on_tick`` is called every ``poll`` seconds while nothing is heard.

        A final transcript is spoken back when ``echo_final_transcript`` is on.
        Returns the final transcript ("" when nothing was heard).

        Raises:
            ExternalServiceError: If recognition failed for a reason other
                than hearing no speech.
        """
        session = self._session
        if session is None:
            return self.transcript
        final: TranscriptEvent | None = None
        try:
            for event in session.events(poll if on_tick is not None else None):
                if event is None:
                    on_tick()
                    continue
                if event.text:
                    self.transcript = event.text
                if on_event is not None:
                    on_event(event)
                if event.is_final:
                    final = event
        finally:
            # Also reached when the UI abandons the loop; the mic must not stay open
            session.stop()
            if self._session is session:
                self._session = None
            self.listening = False

        if final is None:
            return self.transcript
        if final.error and final.error != NO_SPEECH:
            raise ExternalServiceError("Error while listening", details=final.error)
        if final.text and self._settings.echo_final_transcript and self.can_speak:
            self.speak(final.text)
        return final.text

    # -- recording --

    def start_recording(self) -> None:
        capture = require(self._recording, "Audio recording")
        capture.start_recording()
        self.recording = True

    def stop_recording(self) -> AudioBlob:
        capture = require(self._recording, "Audio recording")
        try:
            blob = capture.stop_recording()
        finally:
            self.recording = False
        self.recorded_audio = blob
        return blob

    def toggle_recording(self) -> bool:
        """Start or stop recording; returns the new ``recording`` flag."""
        if self.recording:
            self.stop_recording()
        else:
            self.start_recording()
        return self.recording

    def select_audio_file(self, name: str, data: bytes, mime_type: str | None = None) -> AudioBlob:
        """Use a chosen file instead of a recording."""
        self.recorded_audio = select_file(name, data, mime_type)
        return self.recorded_audio

    # -- relay --

    def transcribe_audio(self, client: APIClient) -> str:
        """Send the current recording or file to the relay."""
        try:
            text = client.transcribe(self.recorded_audio)
        except APIError as exc:
            self.transcription = TranscriptionResult(text="", error=exc.message)
            raise
        self.transcription = TranscriptionResult(text=text)
        self.transcript = text
        return text

    # -- transcript & downloads --

    def copy_transcript(self) -> str:
        """Return the transcript for the clipboard."""
        if not self.transcript:
            raise EmptyInputError("No text to copy")
        return self.transcript

    def download_recording(self) -> tuple[str, bytes]:
        if self.recorded_audio is None:
            raise EmptyInputError("No recording to download")
        return self.recorded_audio.name, self.recorded_audio.data

    def download_generated_audio(self) -> tuple[str, bytes]:
        if self.generated_audio is None:
            raise EmptyInputError("No generated audio to download")
        return self.generated_audio.name, self.generated_audio.data

    # -- lifecycle --

    @property
    def can_speak(self) -> bool:
        return isinstance(self._synthesis, Available)

    def capability_reason(self, name: str) -> str | None:
        """Reason a capability is unavailable, or None if it is usable."""
        capability = {
            "synthesis": self._synthesis,
            "recognition": self._recognition,
            "recording": self._recording,
        }[name]
        return capability.reason if isinstance(capability, Unavailable) else None

    def close(self) -> None:
        """Release every handle (page unload / session reset)."""
        self.stop_listening()
        if isinstance(self._recording, Available):
            self._recording.handle.release()
        self.recording = False
        if isinstance(self._synthesis, Available):
            self._synthesis.handle.stop()
