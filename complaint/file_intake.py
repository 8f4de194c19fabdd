"""
File intake: collects user-selected files, validates the extension and encodes them
as base64 payloads for the /api/analyze create request.
"""
import base64
import mimetypes
from dataclasses import dataclass
from pathlib import PurePath

from complaint.errors import InputValidationError

ALLOWED_EXTENSIONS = (".pdf", ".docx", ".xlsx", ".pptx")


def allowed_file(filename: str) -> bool:
    return PurePath(filename or "").suffix.lower() in ALLOWED_EXTENSIONS


@dataclass(frozen=True)
class IntakeFile:
    name: str
    mime_type: str
    data: bytes

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "type": self.mime_type,
            "data": base64.b64encode(self.data).decode("ascii"),
        }


class FileIntake:
    """Ordered collection of attachments. Re-adding a name replaces that entry in place."""

    def __init__(self):
        self._files: list[IntakeFile] = []

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self):
        return iter(self._files)

    def add(self, name: str, data: bytes, mime_type: str | None = None) -> IntakeFile:
        if not allowed_file(name):
            raise InputValidationError(
                f"지원하지 않는 파일 형식입니다: {name} (허용: {', '.join(ALLOWED_EXTENSIONS)})"
            )
        mime = mime_type or mimetypes.guess_type(name)[0] or "application/octet-stream"
        entry = IntakeFile(name=name, mime_type=mime, data=bytes(data))
        for i, existing in enumerate(self._files):
            if existing.name == name:
                self._files[i] = entry
                return entry
        self._files.append(entry)
        return entry

    def remove(self, name: str) -> bool:
        before = len(self._files)
        self._files = [f for f in self._files if f.name != name]
        return len(self._files) != before

    def clear(self) -> None:
        self._files.clear()

    def names(self) -> list[str]:
        return [f.name for f in self._files]

    def to_payloads(self) -> list[dict]:
        return [f.to_payload() for f in self._files]
