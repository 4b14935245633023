"""Resource locators: one read contract for directory files and archive entries."""

from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO


@dataclass(frozen=True, slots=True)
class ResourceLocator:
    """A resource found under a classpath root.

    ``name`` is the POSIX path relative to a directory root, or the full
    entry name inside an archive root.
    """

    root: Path
    name: str
    archive: bool = False

    @property
    def uri(self) -> str:
        if self.archive:
            return f"zip:{self.root.as_uri()}!/{self.name}"
        return (self.root / self.name).as_uri()

    @property
    def filename(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    def open(self) -> BinaryIO:
        """Open the resource for binary reading. Caller closes the stream."""
        if not self.archive:
            return (self.root / self.name).open("rb")
        with zipfile.ZipFile(self.root) as zf:
            return io.BytesIO(zf.read(self.name))

    def read_bytes(self) -> bytes:
        with self.open() as f:
            return f.read()

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.read_bytes().decode(encoding)

    def __str__(self) -> str:
        return self.uri
