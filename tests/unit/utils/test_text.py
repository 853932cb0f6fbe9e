"""Unit tests for text helpers"""
from placehub.utils.text import ascii_slug, first_sentences, strip_html


class TestAsciiSlug:
    """Tests for slug normalization"""

    def test_hungarian_accents(self):
        assert ascii_slug("Kávézó és Bár") == "kavezo-es-bar"

    def test_double_acute(self):
        assert ascii_slug("Őrség Ünnepe") == "orseg-unnepe"

    def test_runs_collapse_and_edges_trimmed(self):
        assert ascii_slug("  --Etyek / Budai!!  ") == "etyek-budai"

    def test_only_symbols(self):
        assert ascii_slug("!!!") == ""


class TestHtmlHelpers:

    def test_strip_html(self):
        assert strip_html("<p>Hello   <b>world</b></p>\n<p>again</p>") == "Hello world again"

    def test_strip_empty(self):
        assert strip_html(None) == ""

    def test_first_sentences(self):
        html = "<p>Első mondat. Második mondat! Harmadik?</p>"

        assert first_sentences(html, 2) == "Első mondat. Második mondat!"

    def test_first_sentences_without_punctuation(self):
        assert first_sentences("<p>no punctuation here</p>") == ""
