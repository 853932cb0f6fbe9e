"""Text helpers for slugs and SEO snippets"""
import re
import unicodedata
from typing import Optional

from bs4 import BeautifulSoup

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")
_SENTENCE = re.compile(r"[^.!?]+[.!?]+")


def ascii_slug(value: str) -> str:
    """
    ASCII form of a slug: "Kávézó és Bár" -> "kavezo-es-bar".

    Diacritics are removed through NFD decomposition; any run of characters
    outside ``a-z0-9`` becomes a single ``-`` and edge dashes are trimmed.
    """
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("-", stripped.lower()).strip("-")


def strip_html(html: Optional[str]) -> str:
    """Visible text of an HTML fragment with whitespace collapsed"""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(separator=" ")
    return _WHITESPACE.sub(" ", text).strip()


def first_sentences(html: Optional[str], count: int = 2) -> str:
    """First ``count`` sentences of an HTML fragment (split on . ! ?)"""
    text = strip_html(html)
    if not text:
        return ""
    sentences = _SENTENCE.findall(text)
    return " ".join(s.strip() for s in sentences[:count]).strip()
