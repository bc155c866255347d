import re

_CRLF = re.compile(r"\r\n?")
_BLANK_RUNS = re.compile(r"\n{3,}")
_SPACE_RUNS = re.compile(r"[ \t]+")


def clean_text(text: str) -> str:
    """Normalize line endings and collapse blank-line and whitespace runs."""
    if not text:
        return ""
    cleaned = _CRLF.sub("\n", text.replace("\x00", ""))
    cleaned = _BLANK_RUNS.sub("\n\n", cleaned)
    cleaned = _SPACE_RUNS.sub(" ", cleaned)
    return cleaned.strip()


def count_words(text: str) -> int:
    """Count whitespace-separated tokens longer than two characters."""
    return sum(1 for token in text.split() if len(token) > 2)
