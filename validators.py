from typing import Optional


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def parse_year(raw: Optional[str]) -> Optional[int]:
    """Parse a publication year typed by the user. Returns None when it is not a number."""
    if is_blank(raw):
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None
