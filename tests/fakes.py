"""Hardware and engine fakes shared by the unit tests.

Nothing here touches a real microphone, speaker or network service.
"""

import threading
from types import SimpleNamespace


class FakeMicrophone:
    """MicrophoneStream that replays fixed PCM chunks, then idles until closed."""

    def __init__(self, chunks=(), fail_with=None):
        self._chunks = list(chunks)
        self._fail_with = fail_with
        self._closed = threading.Event()
        self.closed = False

    def read(self):
        if self._fail_with is not None:
            raise self._fail_with
        if self._chunks:
            return self._chunks.pop(0)
        # Nothing left to "hear": wait briefly like a real stream would
        self._closed.wait(0.01)
        return b""

    def close(self):
        self.closed = True
        self._closed.set()


class FakeTTSEngine:
    """Records pyttsx3 engine calls instead of producing sound."""

    def __init__(self, voices=None, supports_pitch=True, wav_bytes=b"RIFF....WAVEfmt "):
        self.properties = {
            "rate": 200,
            "voices": voices if voices is not None else [],
        }
        if supports_pitch:
            self.properties["pitch"] = 50
        self.said: list[str] = []
        self.saved: list[tuple[str, str]] = []
        self.run_count = 0
        self.stop_count = 0
        self._wav_bytes = wav_bytes
        self._pending_files: list[tuple[str, str]] = []

    def getProperty(self, name):  # noqa: N802
        return self.properties[name]

    def setProperty(self, name, value):  # noqa: N802
        self.properties[name] = value

    def say(self, text):
        self.said.append(text)

    def save_to_file(self, text, filename):
        self.saved.append((text, filename))
        self._pending_files.append((text, filename))

    def runAndWait(self):  # noqa: N802
        self.run_count += 1
        for _text, filename in self._pending_files:
            with open(filename, "wb") as fh:
                fh.write(self._wav_bytes)
        self._pending_files = []

    def stop(self):
        self.stop_count += 1


def make_voice(voice_id, name, languages=()):
    """A pyttsx3-style Voice object."""
    return SimpleNamespace(id=voice_id, name=name, languages=list(languages))


class FakeRecognitionEngine:
    """RecognitionEngine that hears a scripted list of phrases.

    Each item of ``phrases`` is returned once by ``listen``; ``None`` means
    silence for that window. After the script runs out, ``listen`` keeps
    returning None until the session stops.
    """

    def __init__(self, phrases=(), open_error=None, recognize_error=None):
        self._phrases = list(phrases)
        self._open_error = open_error
        self._recognize_error = recognize_error
        self.opened = False
        self.closed = False

    def open(self):
        if self._open_error is not None:
            raise self._open_error
        self.opened = True

    def close(self):
        self.closed = True

    def listen(self, timeout, phrase_time_limit):
        if self._phrases:
            return self._phrases.pop(0)
        threading.Event().wait(min(timeout, 0.01))
        return None

    def recognize(self, audio):
        if self._recognize_error is not None:
            raise self._recognize_error
        return audio
