"""Speech-to-text through the Whisper transcription HTTP API."""

import logging
import mimetypes
from dataclasses import dataclass
from typing import Protocol

import requests

from signnova.core.config import Settings
from signnova.core.errors import BadRequestError, InternalServerError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 60  # seconds
MAX_AUDIO_BYTES = 25 * 1024 * 1024  # provider upload limit

ALLOWED_AUDIO_MIME_TYPES = (
    "audio/webm",
    "audio/mp3",
    "audio/wav",
    "audio/mpeg",
    "audio/m4a",  # iOS recordings
    "audio/aac",  # some Android recorders
    "audio/3gpp",  # older Android recorders
    "audio/ogg",
    "audio/flac",
    "audio/x-m4a",
)

AUDIO_EXTENSIONS = {
    "audio/m4a": "m4a",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/wave": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/aac": "aac",
    "audio/3gpp": "3gp",
    "audio/flac": "flac",
}


class Transcriber(Protocol):
    """Anything that turns one finite audio buffer into text."""

    def transcribe(self, audio: bytes, filename: str = "audio.webm", content_type: str = "audio/webm") -> str:
        ...


def validate_audio_upload(content_type: str | None, size: int) -> None:
    """Reject audio the provider would refuse, before any call is made."""
    if content_type not in ALLOWED_AUDIO_MIME_TYPES:
        raise BadRequestError(
            f"Invalid file type. Allowed types: {', '.join(ALLOWED_AUDIO_MIME_TYPES)}"
        )
    if size > MAX_AUDIO_BYTES:
        raise BadRequestError("File size exceeds 25MB limit")


def audio_filename(filename: str | None, content_type: str | None) -> str:
    """Keep the client filename when it has an extension, else derive one from the MIME type."""
    name = (filename or "").strip()
    if name and "." in name and not name.endswith("."):
        return name
    extension = AUDIO_EXTENSIONS.get(content_type or "")
    if extension is None:
        guessed = mimetypes.guess_extension(content_type or "")
        extension = guessed.lstrip(".") if guessed else "wav"
    return f"audio.{extension}"


@dataclass
class WhisperTranscriber:
    api_key: str
    model: str = "whisper-1"
    language: str = "en"
    api_url: str = "https://api.openai.com/v1/audio/transcriptions"

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhisperTranscriber":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.transcription_model,
            language=settings.transcription_language,
            api_url=settings.transcription_api_url,
        )

    def transcribe(self, audio: bytes, filename: str = "audio.webm", content_type: str = "audio/webm") -> str:
        try:
            response = requests.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                files={"file": (filename, audio, content_type)},
                data={"model": self.model, "language": self.language},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            return response.json()["text"]
        except (requests.RequestException, KeyError, ValueError) as exc:
            logger.exception("Transcription request failed for %s (%d bytes)", filename, len(audio))
            raise InternalServerError("Failed to transcribe audio") from exc
