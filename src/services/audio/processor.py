"""Audio processing utilities for PCM data.

Wraps raw PCM bytes into WAV containers and reads them back, plus the MIME
checks shared by file selection and the relay.
"""

import io
import mimetypes
import wave

# MIME types accepted in addition to ``audio/*`` (browser recorders emit webm).
_EXTRA_AUDIO_TYPES = {"video/webm", "application/octet-stream"}


def guess_mime_type(name: str) -> str | None:
    """Guess a MIME type from a file name, treating ``.wav`` uniformly."""
    mime, _ = mimetypes.guess_type(name)
    if mime in ("audio/x-wav", "audio/wave"):
        return "audio/wav"
    return mime


def is_audio_mime(mime_type: str | None) -> bool:
    """Return True for MIME types the relay accepts as audio."""
    if not mime_type:
        return False
    base = mime_type.split(";", 1)[0].strip().lower()
    return base.startswith("audio/") or base in _EXTRA_AUDIO_TYPES


class AudioProcessor:
    """Handles PCM audio data conversion.

    Wraps raw PCM bytes in a WAV container, unwraps them again and
    reports recording duration.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        """Initialize the audio processor.

        Args:
            sample_rate: Audio sample rate in Hz (default: 16 kHz).
            sample_width: Bytes per sample (2 = 16-bit signed PCM).
            channels: Number of audio channels (1 = mono).
        """
        self.sample_rate = sample_rate
        self.sample_width = sample_width
        self.channels = channels

    @property
    def frame_size(self) -> int:
        return self.sample_width * self.channels

    def to_wav_bytes(self, pcm_data: bytes) -> bytes:
        """Wrap raw PCM bytes in an in-memory WAV container.

        Empty input still yields a valid (header-only) WAV file.
        A trailing partial frame is dropped.
        """
        usable = len(pcm_data) - (len(pcm_data) % self.frame_size)
        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(self.channels)
            wf.setsampwidth(self.sample_width)
            wf.setframerate(self.sample_rate)
            wf.writeframes(pcm_data[:usable])
        return buf.getvalue()

    @staticmethod
    def read_wav(wav_bytes: bytes) -> tuple[bytes, int, int, int]:
        """Unwrap a WAV container.

        Returns:
            Tuple of (pcm_bytes, sample_rate, sample_width, channels).

        Raises:
            ValueError: If the bytes are not a readable WAV file.
        """
        try:
            with wave.open(io.BytesIO(wav_bytes), "rb") as wf:
                pcm = wf.readframes(wf.getnframes())
                return pcm, wf.getframerate(), wf.getsampwidth(), wf.getnchannels()
        except (wave.Error, EOFError) as exc:
            raise ValueError(f"Not a valid WAV file: {exc}") from exc

    def duration(self, pcm_data: bytes) -> float:
        """Duration in seconds of the given PCM bytes."""
        return len(pcm_data) / (self.sample_rate * self.frame_size)
