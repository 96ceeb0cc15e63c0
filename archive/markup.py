"""archive/markup.py — Normalize Runeberg's HTML-ish dialect into renderable HTML.

Runeberg pages use a handful of home-made tags (<sp>, <sc>, <big>, <footnote>,
<tab>), shorthand alignment attributes on tables, and leave <p> unclosed. The
text is first rewritten at string level, then parsed with an HTML5 tree
builder (which closes what was left open), cleaned up node by node, and
rendered back to a body fragment.

Anything we fail to rewrite tends to show up as an attribute without a value,
which the parser renders as `=""`. Such output is rejected instead of shipped.
"""

import re
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from errors import StructuralViolation

RUNEBERG_ORIGIN = "https://runeberg.org"

# Apparently XHTML and thus EPUB doesn't have (many) named entities.
# emsp U+2003 is approx 4 spaces.
TAB = "\u2003\u2003"

FOOTNOTE_LABEL = "fotnot"

INLINE_REPLACEMENTS = (
    ("<sp>", '<span class="spaced">'),
    ("</sp>", "</span>"),
    ("<sc>", '<span class="smallcaps">'),
    ("</sc>", "</span>"),
    ("<big>", '<span class="big">'),
    ("</big>", "</span>"),
    ("<footnote>", f'<span class="footnote"> [{FOOTNOTE_LABEL}: '),
    ("</footnote>", "]</span>"),
    ("<tab>", TAB),
)

# <td c> / <table r>: single-word alignment shorthand
ALIGN_SHORTHAND_RE = re.compile(r"(<table|<td) ([a-z]+)>")
# <td 2c>: colspan plus alignment
COLSPAN_SHORTHAND_RE = re.compile(r"(<td) ([1-9]+)([a-z]+)>")

# Text directly followed by an inline open tag wants a space in between,
# except after typographic closing quotes. \s is ASCII-only on purpose so the
# em spaces of <tab> count as text.
SPACE_BEFORE_TAG_RE = re.compile(r"([^\s>’»])(<[a-z0-9_ =\"]+>)", re.ASCII)
NEWLINE_BEFORE_BR_RE = re.compile(r"(.+)(<br/>)")


def preprocess(s: str) -> str:
    """String-level rewrite of the dialect into plain tags with classes."""
    for old, new in INLINE_REPLACEMENTS:
        s = s.replace(old, new)

    s = ALIGN_SHORTHAND_RE.sub(r'\1 class="_\2">', s)
    s = COLSPAN_SHORTHAND_RE.sub(r'\1 colspan="\2" class="_\3">', s)

    # Runeberg leaves out <tr> when a row starts on its own line
    s = s.replace("\n<td", "\n<tr><td")
    return s


# ─── Node rules ──────────────────────────────────────────────────────────────

class NodeRule(ABC):
    """One cleanup applied to every node of the parsed tree."""

    name = "BaseRule"

    @abstractmethod
    def apply(self, node):
        """Return the node to continue with (a replacement, or node itself)."""


class AlignmentRule(NodeRule):
    """<p align=...> and <div align=...> become class="center"."""

    name = "alignment"
    tags = ("p", "div")

    def apply(self, node):
        if not isinstance(node, Tag) or node.name not in self.tags:
            return node
        if "align" not in node.attrs:
            return node
        del node.attrs["align"]
        existing = node.attrs.get("class")
        if existing:
            node["class"] = f"{existing},center"
        else:
            node["class"] = "center"
        return node


class ParagraphTextRule(NodeRule):
    """Trailing newlines inside a paragraph are left over from the txt lines."""

    name = "paragraph-text"

    def apply(self, node):
        if not _is_text(node):
            return node
        parent = node.parent
        if parent is None or parent.name != "p":
            return node
        trimmed = str(node).rstrip("\n")
        if trimmed == str(node):
            return node
        replacement = NavigableString(trimmed)
        node.replace_with(replacement)
        return replacement


class LinkRule(NodeRule):
    """Root-relative links point back into runeberg.org."""

    name = "links"

    def apply(self, node):
        if not isinstance(node, Tag) or node.name != "a":
            return node
        href = node.attrs.get("href")
        if href and href.startswith("/"):
            node["href"] = RUNEBERG_ORIGIN + href
        return node


# Order matters: attribute cleanup, then text trimming, then link rewriting.
NODE_RULES = (AlignmentRule(), ParagraphTextRule(), LinkRule())


def _is_text(node) -> bool:
    # Comments, doctypes and CDATA are PreformattedStrings
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def walk(node, rules=NODE_RULES) -> None:
    """Depth-first: apply every rule to the node, then recurse into its children."""
    for rule in rules:
        node = rule.apply(node)
    if isinstance(node, Tag):
        for child in list(node.contents):
            walk(child, rules)


# ─── Parse / render ──────────────────────────────────────────────────────────

def parse(s: str) -> BeautifulSoup:
    # Keep class and friends as plain strings, they are joined with "," here
    return BeautifulSoup(s, "html5lib", multi_valued_attributes=None)


def get_body(soup: BeautifulSoup) -> Tag:
    body = soup.find("body")
    if body is None:
        raise StructuralViolation("Missing <body> in the node tree")
    return body


def finish(body: str) -> str:
    """Whitespace fixups on the rendered fragment, then the leftover check."""
    # Ensure newlines after closing p-tag
    body = body.replace("</p><", "</p>\n\n<")

    # Ensure space between text and inline tags (want: `text <strong>`)
    body = SPACE_BEFORE_TAG_RE.sub(r"\1 \2", body)

    # Ensure newline before hard linebreak
    body = NEWLINE_BEFORE_BR_RE.sub(r"\1\n\2", body)

    if '=""' in body:
        raise StructuralViolation(
            'Found ="" in body, meaning there was an htmlish tag with unhandled attribute'
        )
    return body


def normalize_markup(s: str) -> str:
    """Turn a Runeberg html-ish document or fragment into a body fragment."""
    soup = parse(preprocess(s))
    body = get_body(soup)
    walk(soup)
    return finish(f"\n{body.decode_contents()}\n")
