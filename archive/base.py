"""archive/base.py — Read members from a Runeberg zip archive or an unpacked copy."""

import io
import zipfile
from pathlib import Path

from errors import MissingResource


def decode_latin1(data: bytes) -> str:
    """Decode ISO-8859-1 bytes (Metadata and the bundled reference lists)."""
    return data.decode("iso-8859-1")


def split_lines(text: str) -> list[str]:
    """Split on LF only, dropping one trailing CR per line.

    A final newline does not start an extra empty line. Other characters that
    str.splitlines() treats as breaks (form feed, NEL, U+2028 ...) are text.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def decode_text(data: bytes) -> str:
    """Decode a page, index or html member.

    Newer archives are UTF-8, older ones are ISO-8859-1. Latin-1 maps every
    byte, so it is only tried when the bytes are not valid UTF-8.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("iso-8859-1")


class Archive:
    """Member access over either a zip file or an extracted directory."""

    def __init__(self, zip_file: zipfile.ZipFile | None = None, root: Path | None = None):
        self._zip = zip_file
        self._root = root

    @classmethod
    def open(cls, source) -> "Archive":
        """Open zip bytes, a path to a zip file, or a path to an unpacked archive."""
        if isinstance(source, (bytes, bytearray)):
            return cls._open_zip(io.BytesIO(source), "<bytes>")
        path = Path(source)
        if path.is_dir():
            return cls(root=path)
        if not path.exists():
            raise MissingResource(f"Archive not found: {path}")
        return cls._open_zip(io.BytesIO(path.read_bytes()), str(path))

    @classmethod
    def _open_zip(cls, fileobj, label: str) -> "Archive":
        try:
            return cls(zip_file=zipfile.ZipFile(fileobj))
        except zipfile.BadZipFile as e:
            raise MissingResource(f"{label} is not a readable zip archive: {e}") from e

    def names(self) -> list[str]:
        if self._zip is not None:
            return self._zip.namelist()
        return sorted(
            p.relative_to(self._root).as_posix()
            for p in self._root.rglob("*") if p.is_file()
        )

    def has(self, name: str) -> bool:
        if self._zip is not None:
            return name in self._zip.namelist()
        return (self._root / name).is_file()

    def read(self, name: str) -> bytes:
        if not self.has(name):
            raise MissingResource(f"{name} not found in archive")
        if self._zip is not None:
            return self._zip.read(name)
        return (self._root / name).read_bytes()

    def read_text(self, name: str) -> str:
        return decode_text(self.read(name))
