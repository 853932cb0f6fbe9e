"""Unit tests for route language validation"""
import pytest

from placehub.core.languages import normalize_lang, soft_lang
from placehub.db.enums import Lang
from placehub.exceptions import BadRequestError


class TestNormalizeLang:

    def test_supported(self):
        assert normalize_lang("de") == Lang.DE

    def test_missing(self):
        with pytest.raises(BadRequestError) as exc_info:
            normalize_lang(None)
        assert exc_info.value.error_code.code == "REQUEST_001"

    def test_unsupported(self):
        with pytest.raises(BadRequestError) as exc_info:
            normalize_lang("fr")
        assert exc_info.value.error_code.code == "REQUEST_002"
        assert exc_info.value.context == {"lang": "fr"}


class TestSoftLang:

    def test_falls_back_to_hungarian(self):
        assert soft_lang("fr") == Lang.HU
        assert soft_lang(None) == Lang.HU

    def test_case_insensitive(self):
        assert soft_lang("EN") == Lang.EN
