"""Best-effort date normalization.

Not a general date parser: a string either matches one of the layouts in
``rules.DATE_LAYOUTS`` exactly or it is left alone. Time of day and zone are
discarded on success.
"""

from __future__ import annotations

from datetime import date, datetime

import ciso8601

from .errors import NotADate
from .rules import DATE_LAYOUTS


def _parse_layout(text: str, fmt: str | None) -> date:
    if fmt is None:
        return ciso8601.parse_rfc3339(text).date()
    # fractional seconds carry no date information
    return datetime.strptime(text.split(".", 1)[0], fmt).date()


def parse_date(text: str) -> date:
    """Parse ``text`` against the accepted layouts.

    Raises:
        NotADate: if no layout matches.
    """
    for _name, shape, fmt in DATE_LAYOUTS:
        if not shape.fullmatch(text):
            continue
        try:
            return _parse_layout(text, fmt)
        except ValueError:
            continue
    raise NotADate(f"not a date: {text!r}")


def normalize_date(text: str) -> str:
    """Return ``text`` as YYYY-MM-DD, or unchanged if it is not a date."""
    try:
        return parse_date(text).isoformat()
    except NotADate:
        return text
