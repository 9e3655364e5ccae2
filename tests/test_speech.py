from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from jyoti_tool.speech import SpeechCapture, append_transcript


class _WaitTimeoutError(Exception):
    pass


class _UnknownValueError(Exception):
    pass


class _RequestError(Exception):
    pass


def _backend(
    result: str | Exception = "बच्चे को बुखार",
    mics: list[str] | Exception | None = None,
) -> Any:
    captured: dict[str, Any] = {}

    class _Microphone:
        @staticmethod
        def list_microphone_names() -> list[str]:
            if isinstance(mics, Exception):
                raise mics
            return ["default"] if mics is None else mics

        def __enter__(self) -> _Microphone:
            return self

        def __exit__(self, *_exc: object) -> None:
            return None

    class _Recognizer:
        def listen(self, source: Any, timeout: float, phrase_time_limit: float) -> str:
            captured["timeout"] = timeout
            return "audio"

        def recognize_google(self, audio: str, language: str) -> str:
            captured["language"] = language
            if isinstance(result, Exception):
                raise result
            return result

    return SimpleNamespace(
        Microphone=_Microphone,
        Recognizer=_Recognizer,
        WaitTimeoutError=_WaitTimeoutError,
        UnknownValueError=_UnknownValueError,
        RequestError=_RequestError,
        captured=captured,
    )


def test_listen_returns_transcript_in_hindi() -> None:
    backend = _backend()
    capture = SpeechCapture(backend=backend)
    assert capture.available
    assert capture.listen() == "बच्चे को बुखार"
    assert backend.captured["language"] == "hi-IN"


def test_unrecognized_speech_yields_none() -> None:
    capture = SpeechCapture(backend=_backend(result=_UnknownValueError()))
    assert capture.listen() is None


def test_request_error_yields_none() -> None:
    capture = SpeechCapture(backend=_backend(result=_RequestError("quota")))
    assert capture.listen() is None


def test_unavailable_without_microphone() -> None:
    capture = SpeechCapture(backend=_backend(mics=AttributeError("no PyAudio")))
    assert not capture.available
    assert capture.listen() is None

    assert not SpeechCapture(backend=_backend(mics=[])).available


def test_unavailable_without_package(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("jyoti_tool.speech._load_backend", lambda: None)
    capture = SpeechCapture()
    assert not capture.available
    assert capture.listen() is None


def test_append_transcript() -> None:
    assert append_transcript("", "टीका") == "टीका"
    assert append_transcript("शिशु", "टीका") == "शिशु टीका"
    assert append_transcript("शिशु", None) == "शिशु"
