"""
Redirect precedence for site keys and slugs.

Both tables share the same shape (``is_primary``, ``is_active`` and an
optional ``redirect_to_id``), so one decision function serves both:

1. an explicit ``redirect_to_id`` whose target is active wins;
2. a non-primary record redirects to the primary record of its group,
   when one exists;
3. anything else is canonical as-is.

The caller loads the explicit target itself and passes it in; nothing here
touches relationship attributes.
"""
from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Canonical:
    """The requested record is the canonical address"""
    record: Any


@dataclass(frozen=True)
class RedirectTo:
    """The request must be redirected to ``record``"""
    record: Any


RedirectDecision = Union[Canonical, RedirectTo]


def explicit_target(record: Any, target: Optional[Any]) -> Optional[Any]:
    """``target`` when it is the active ``redirect_to_id`` row of ``record``"""
    if record.redirect_to_id is None or target is None:
        return None
    if target.id != record.redirect_to_id or target.id == record.id:
        return None
    return target if target.is_active else None


def needs_primary_lookup(record: Any, target: Optional[Any] = None) -> bool:
    """True when rule 2 applies and the caller has to load the primary record"""
    return explicit_target(record, target) is None and not record.is_primary


def resolve_redirect(
    record: Any,
    primary: Optional[Any] = None,
    target: Optional[Any] = None,
) -> RedirectDecision:
    """
    Decide where a site key or slug lookup ends up.

    Args:
        record: SiteKey or Slug matched by the request
        primary: Active primary record of the same group, when the caller
            loaded one (see ``needs_primary_lookup``)
        target: Row referenced by ``record.redirect_to_id``, when set

    Returns:
        Canonical(record) or RedirectTo(target)
    """
    explicit = explicit_target(record, target)
    if explicit is not None:
        return RedirectTo(explicit)
    if not record.is_primary and primary is not None and primary.id != record.id:
        return RedirectTo(primary)
    return Canonical(record)
