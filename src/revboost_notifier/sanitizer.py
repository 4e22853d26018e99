"""HTML escaping for untrusted values interpolated into email markup."""

# Ampersand must come first so entities produced below are not re-escaped.
_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape(text: str) -> str:
    """Replace the five HTML-significant characters with entities.

    Not idempotent: escaping already-escaped text escapes the ampersand of
    each existing entity again.
    """
    for char, entity in _REPLACEMENTS:
        text = text.replace(char, entity)
    return text
