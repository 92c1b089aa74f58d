from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")

_HTML_ESCAPES = str.maketrans(
    {
        "<": "&lt;",
        ">": "&gt;",
        "&": "&amp;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


def sanitize(value: T) -> T:
    """
    HTML-escape the five reserved characters of a string.

    Not idempotent: escaping `&amp;` again yields `&amp;amp;`.
    Non-strings are returned untouched.
    """
    if not isinstance(value, str):
        return value
    return value.translate(_HTML_ESCAPES)  # type: ignore[return-value]
