"""
Search-key normalization for book titles.

The store can only answer range queries over a single ordered column, so
case and diacritic insensitive prefix search is done against a normalized
copy of the title: "Café Zürich" is indexed as "cafe zurich" and a search
for "CAFE" becomes the range ["cafe", "cafe\\uf8ff"].
"""

import unicodedata

DEFAULT_MAX_LENGTH = 500

# Stored instead of "" so the column stays usable as a query anchor.
NON_BLANK_SEARCH_TEXT_FALLBACK = " "


def normalize_search_text(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Normalize text into a sortable, range-queryable search key.

    Trims surrounding whitespace, strips combining marks after canonical
    decomposition, lowercases and truncates to ``max_length`` characters.

    Args:
        text: Arbitrary Unicode text, usually a book title or a search term
        max_length: Maximum length of the returned key (default: 500)

    Returns:
        The normalized key, or "" for blank input
    """
    trimmed = text.strip()
    if not trimmed:
        return ""
    decomposed = unicodedata.normalize("NFD", trimmed)
    without_marks = "".join(
        ch for ch in decomposed if not unicodedata.category(ch).startswith("M")
    )
    # Dropping a trailing combining mark can leave trailing whitespace behind
    lowered = without_marks.lower().strip()
    return lowered[:max_length].rstrip()
