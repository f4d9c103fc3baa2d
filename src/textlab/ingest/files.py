"""Uploaded file validation and decoding."""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Optional

from fastapi import UploadFile

from ..errors import InvalidArgument

logger = logging.getLogger("textlab.ingest")

DEFAULT_ALLOWED_EXTENSIONS = (".txt", ".log")
DEFAULT_MAX_BYTES = 10 * 1024 * 1024

# UTF-32 marks must be tested before UTF-16 since they share a prefix.
BOM_ENCODINGS = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


@dataclass(slots=True)
class LoadedFile:
    file_name: str
    text: str


def decode_bytes(data: bytes) -> str:
    """Decode ``data`` honouring a byte-order mark, defaulting to UTF-8."""

    for bom, encoding in BOM_ENCODINGS:
        if data.startswith(bom):
            return data[len(bom) :].decode(encoding, errors="replace")
    return data.decode("utf-8", errors="replace")


class FileContentLoader:
    """Check uploads against an extension allow-list and size limit."""

    def __init__(
        self,
        allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self.allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)
        self.max_bytes = max_bytes

    def validate_name(self, file_name: Optional[str]) -> None:
        if not file_name or not file_name.strip():
            raise InvalidArgument("File name is required")
        ext = PurePath(file_name).suffix.lower()
        if ext not in self.allowed_extensions:
            raise InvalidArgument(
                f"Unsupported file extension '{ext}'. Allowed: {', '.join(self.allowed_extensions)}"
            )

    def validate_size(self, size: int) -> None:
        if size == 0:
            raise InvalidArgument("Empty file")
        if size > self.max_bytes:
            raise InvalidArgument(f"File is too large (max {self.max_bytes} bytes)")

    def validate(self, file_name: Optional[str], size: int) -> None:
        self.validate_name(file_name)
        self.validate_size(size)

    def decode(self, data: bytes) -> str:
        content = decode_bytes(data)
        if not content.strip():
            raise InvalidArgument("File content is empty")
        return content

    def read(self, file_name: Optional[str], data: Optional[bytes]) -> LoadedFile:
        """Validate and decode raw bytes received under ``file_name``."""

        if data is None:
            raise InvalidArgument("File is required")
        self.validate(file_name, len(data))
        text = self.decode(data)
        logger.debug("Loaded %s: %d bytes, %d chars", file_name, len(data), len(text))
        return LoadedFile(file_name=file_name, text=text)

    async def load(self, upload: Optional[UploadFile]) -> LoadedFile:
        """Read an uploaded file, consuming at most ``max_bytes + 1`` bytes of it."""

        if upload is None:
            raise InvalidArgument("File is required")
        self.validate_name(upload.filename)
        data = await upload.read(self.max_bytes + 1)
        return self.read(upload.filename, data)
