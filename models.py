"""models.py — Shared data types for runepub."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthorRecord:
    key: str
    full_name: str   # Given name first, e.g. "Selma Lagerlöf"


@dataclass(frozen=True)
class TitleRecord:
    key: str
    title: str
    year: str        # As written in the title table, may be empty


@dataclass(frozen=True)
class Chapter:
    title: str       # Section title shown in the table of contents
    body: str        # HTML fragment, to be wrapped in a body tag


@dataclass
class BookMetadata:
    title: str = ""
    title_key: str = ""
    author: str = ""
    language: str = ""
    url: str = ""    # Canonical source URL on runeberg.org
    year: str = ""


@dataclass(frozen=True)
class Book:
    title: str
    title_key: str
    author: str
    language: str
    url: str
    year: str = ""
    chapters: tuple[Chapter, ...] = field(default_factory=tuple)
    maybe_missing_blank_first_line: bool = False

    def titles(self) -> list[str]:
        return [ch.title for ch in self.chapters]
