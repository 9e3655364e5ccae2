"""Optional voice input for the assistant tab.

Backed by the ``SpeechRecognition`` package when it (and a microphone
backend) is installed. Without it the capability is simply unavailable.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "hi-IN"


def _load_backend() -> Any | None:
    try:
        import speech_recognition as sr
    except ImportError:
        return None
    return sr


class SpeechCapture:
    """Listen once on the default microphone and return the transcript."""

    def __init__(
        self,
        language: str = DEFAULT_LANGUAGE,
        timeout: float = 6,
        phrase_time_limit: float = 10,
        backend: Any | None = None,
    ) -> None:
        self._sr = backend if backend is not None else _load_backend()
        self.language = language
        self.timeout = timeout
        self.phrase_time_limit = phrase_time_limit

    @property
    def available(self) -> bool:
        if self._sr is None:
            return False
        try:
            names = self._sr.Microphone.list_microphone_names()
        except (AttributeError, OSError):
            # PyAudio missing or no audio device
            return False
        return bool(names)

    def listen(self) -> str | None:
        """Transcript of one utterance, or None if nothing was recognized."""
        if not self.available:
            return None
        sr = self._sr
        recognizer = sr.Recognizer()
        try:
            with sr.Microphone() as source:
                audio = recognizer.listen(
                    source,
                    timeout=self.timeout,
                    phrase_time_limit=self.phrase_time_limit,
                )
            text = recognizer.recognize_google(audio, language=self.language)
        except (sr.WaitTimeoutError, sr.UnknownValueError):
            return None
        except (sr.RequestError, OSError) as exc:
            logger.warning("Speech recognition failed: %s", exc)
            return None
        text = str(text).strip()
        return text or None


def append_transcript(current: str, transcript: str | None) -> str:
    """Append a transcript to the text already typed in the input box."""
    if not transcript:
        return current
    if current:
        return f"{current} {transcript}"
    return transcript
