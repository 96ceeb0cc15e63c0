"""archive/metadata.py — Parse the archive's Metadata member."""

from archive.base import decode_latin1, split_lines
from archive.lookup import LookupTables
from errors import MissingResource, UnknownReference
from models import BookMetadata

SOURCE_URL = "https://runeberg.org/{title_key}/"

# Checked in this order; the first empty one is reported.
REQUIRED_FIELDS = (
    ("Title", lambda m: m.title),
    ("TitleKey", lambda m: m.title_key),
    ("Author", lambda m: m.author),
    ("Language", lambda m: m.language),
)


def parse_metadata(data: bytes, tables: LookupTables) -> BookMetadata:
    """
    Read `KEY: value` lines (ISO-8859-1) into a BookMetadata.
    Unknown keys are ignored; an unknown AUTHORKEY is fatal.
    """
    meta = BookMetadata()
    for line in split_lines(decode_latin1(data)):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        value = value.strip(" \t")
        if key == "TITLE":
            meta.title = value
        elif key == "TITLEKEY":
            meta.title_key = value
            meta.url = SOURCE_URL.format(title_key=value)
            title = tables.titles.get(value)
            if title is not None:
                meta.year = title.year
        elif key == "AUTHORKEY":
            author = tables.authors.get(value)
            if author is None:
                raise UnknownReference(f"Unknown AUTHORKEY: {value}")
            meta.author = author.full_name
        elif key == "LANGUAGE":
            meta.language = value

    for label, get in REQUIRED_FIELDS:
        if not get(meta):
            raise MissingResource(f"{label} not found in metadata")

    return meta
