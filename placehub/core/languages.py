"""Language validation shared by every public and admin route"""
from typing import Optional

from placehub.db.enums import Lang
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError


def normalize_lang(lang: Optional[str]) -> Lang:
    """
    Validate a route language.

    Raises:
        BadRequestError: missing or unsupported language
    """
    if not lang:
        raise BadRequestError(ErrorCodeDictionary.REQUEST_001)
    try:
        return Lang(lang)
    except ValueError:
        raise BadRequestError(
            ErrorCodeDictionary.REQUEST_002.with_message(f'Unsupported lang: "{lang}". Use hu|en|de.'),
            context={"lang": lang},
        )


def soft_lang(lang: Optional[str], fallback: Lang = Lang.HU) -> Lang:
    """Language for public views that fall back instead of failing"""
    try:
        return Lang((lang or "").lower())
    except ValueError:
        return fallback
