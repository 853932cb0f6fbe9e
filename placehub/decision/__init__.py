"""Error catalog and redirect decisions"""
from placehub.decision.error_codes import ErrorCode, ErrorCodeDictionary, ErrorKind
from placehub.decision.redirects import Canonical, RedirectTo, resolve_redirect

__all__ = [
    "ErrorCode",
    "ErrorCodeDictionary",
    "ErrorKind",
    "Canonical",
    "RedirectTo",
    "resolve_redirect",
]
