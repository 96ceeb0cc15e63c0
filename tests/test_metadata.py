"""Tests for the Metadata loader (archive/metadata.py)."""

import pytest

from archive.lookup import default_lookup_tables
from archive.metadata import REQUIRED_FIELDS, parse_metadata
from builders import make_metadata
from errors import MissingResource, UnknownReference


@pytest.fixture
def tables():
    return default_lookup_tables()


class TestParseMetadata:
    def test_all_fields(self, tables):
        meta = parse_metadata(make_metadata(), tables)
        assert meta.title == "Körkarlen"
        assert meta.title_key == "korkarlen"
        assert meta.author == "Selma Lagerlöf"
        assert meta.language == "sv"

    def test_url_from_title_key(self, tables):
        meta = parse_metadata(make_metadata(), tables)
        assert meta.url == "https://runeberg.org/korkarlen/"

    def test_year_from_title_table(self, tables):
        assert parse_metadata(make_metadata(), tables).year == "1912"

    def test_year_is_optional(self, tables):
        meta = parse_metadata(make_metadata(title="Okänd", title_key="okand"), tables)
        assert meta.year == ""

    def test_values_are_trimmed(self, tables):
        data = b"TITLE:\t Doktor Glas \nTITLEKEY: drglas\nAUTHORKEY: soderberg\nLANGUAGE: sv\n"
        meta = parse_metadata(data, tables)
        assert meta.title == "Doktor Glas"
        assert meta.author == "Hjalmar Söderberg"

    def test_unknown_keys_and_lines_without_colon_ignored(self, tables):
        meta = parse_metadata(make_metadata(extra="MARC: 123\nnonsense line\n"), tables)
        assert meta.title == "Körkarlen"

    def test_value_may_contain_colon(self, tables):
        meta = parse_metadata(make_metadata(title="Fänrik Ståls sägner: andra samlingen"), tables)
        assert meta.title == "Fänrik Ståls sägner: andra samlingen"

    def test_only_newline_ends_a_line(self, tables):
        data = b"TITLE: Foo\x85Bar\r\nTITLEKEY: drglas\nAUTHORKEY: soderberg\nLANGUAGE: sv\n"
        assert parse_metadata(data, tables).title == "Foo\x85Bar"

    def test_unknown_author(self, tables):
        with pytest.raises(UnknownReference, match="nobody"):
            parse_metadata(make_metadata(author_key="nobody"), tables)

    @pytest.mark.parametrize("missing,label", [
        ({"title": None}, "Title"),
        ({"title_key": None}, "TitleKey"),
        ({"author_key": None}, "Author"),
        ({"language": None}, "Language"),
        ({"language": ""}, "Language"),
    ])
    def test_required_field_missing(self, tables, missing, label):
        with pytest.raises(MissingResource, match=f"^{label} not found"):
            parse_metadata(make_metadata(**missing), tables)

    def test_required_fields_constant(self):
        assert [label for label, _ in REQUIRED_FIELDS] == ["Title", "TitleKey", "Author", "Language"]
