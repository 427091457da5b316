from __future__ import annotations

from dataclasses import dataclass

_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
}


@dataclass(frozen=True)
class AudioPayload:
    """One captured recording."""
    data: bytes
    mime_type: str = "audio/webm;codecs=opus"
    filename: str = ""

    @property
    def upload_name(self) -> str:
        if self.filename:
            return self.filename
        base_type = self.mime_type.split(";", 1)[0].strip().lower()
        return f"audio.{_EXTENSIONS.get(base_type, 'webm')}"
