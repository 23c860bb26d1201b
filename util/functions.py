# util/functions.py
import math


def clip_words(text: str, max_words: int = 100) -> str:
    """
    - Trim 'text' to at most `max_words` tokens separated by whitespace.
    - Adds an ellipsis when trimming occurs.
    """
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + " …"


def first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def round_half_up(value: float) -> int:
    # round() is banker's rounding; 12.5 must become 13.
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0
