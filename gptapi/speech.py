"""The text-to-speech endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from gptapi.transport import Request, Response, Transport


class SpeechModel(str, Enum):
    """Speech synthesis models."""

    TTS_1 = "tts-1"
    TTS_1_HD = "tts-1-hd"
    CANARY_TTS = "canary-tts"


class SpeechVoice(str, Enum):
    """Available voices."""

    ALLOY = "alloy"
    ECHO = "echo"
    FABLE = "fable"
    ONYX = "onyx"
    NOVA = "nova"
    SHIMMER = "shimmer"


class SpeechResponseFormat(str, Enum):
    """Audio formats of the result."""

    MP3 = "mp3"
    OPUS = "opus"
    AAC = "aac"
    FLAC = "flac"
    WAV = "wav"
    PCM = "pcm"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class CreateSpeechRequest:
    """Parameters of a speech request; format and speed are optional."""

    model: SpeechModel | str
    input: str
    voice: SpeechVoice | str
    response_format: SpeechResponseFormat | str | None = None
    speed: float = 0.0

    def _body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": _text(self.model),
            "input": self.input,
            "voice": _text(self.voice),
        }
        if self.response_format:
            body["response_format"] = _text(self.response_format)
        if self.speed:
            body["speed"] = self.speed
        return body


class Speech:
    """Client for the speech endpoint."""

    def __init__(self, transport: Transport, base_url: str, api_key: str = "") -> None:
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def create(self, request: CreateSpeechRequest) -> Response:
        """Synthesise speech; the returned response holds the audio bytes."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        resp = self.transport.send(
            Request("POST", f"{self.base_url}/audio/speech", headers, request._body())
        )
        if resp.status_code >= 400:
            resp.json()  # raises APIError for error statuses
        return resp