from .search_text import NON_BLANK_SEARCH_TEXT_FALLBACK, normalize_search_text

__all__ = ["NON_BLANK_SEARCH_TEXT_FALLBACK", "normalize_search_text"]
