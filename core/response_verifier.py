# core/response_verifier.py
"""
Word/phrase-overlap check of a free-text LLM answer against a dictionary
meaning.

The meaning is split on commas into sense phrases. Inside each phrase only
significant words (length > 2) count. A phrase found verbatim in the answer
matches all of its significant words at once; otherwise every significant
word is looked up on its own. Repeated words in different phrases count
toward the denominator each time.

Accuracy compares the unrounded ratio with the threshold, so
`match_percentage` (rounded half-up for display) may read 40 while
`is_accurate` is still False for a 39.5% overlap.
"""
from typing import Iterable, Optional, Tuple
from core.entities import ReferenceEntry, VerificationResult
from util.constants import VerificationPolicy
from util.functions import percentage, round_half_up


def sense_phrases(meaning: str) -> list[str]:
    return [p.strip() for p in meaning.split(VerificationPolicy.SENSE_SEPARATOR)]


def significant_words(phrase: str) -> list[str]:
    return [
        w for w in phrase.split() if len(w) >= VerificationPolicy.MIN_SIGNIFICANT_WORD_LENGTH
    ]


def score_phrase(phrase: str, candidate_lower: str) -> Tuple[list[str], int]:
    """
    Return (matched words, significant word count) for one lower-cased phrase.
    """
    words = significant_words(phrase)
    if phrase and phrase in candidate_lower:
        return list(words), len(words)
    return [w for w in words if w in candidate_lower], len(words)


def _dedupe(words: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(words))


def verify_response(
    reference: ReferenceEntry,
    candidate_text: Optional[str],
    *,
    threshold: int = VerificationPolicy.ACCURACY_THRESHOLD,
) -> VerificationResult:
    """
    Score `candidate_text` against `reference.canonical_meaning`.

    Pure function: no I/O, identical inputs give identical results. An empty
    meaning or candidate yields a 0% score, never an exception.
    """
    candidate = candidate_text or ""
    candidate_lower = candidate.lower()
    meaning = reference.canonical_meaning or ""

    matched: list[str] = []
    total = 0
    for phrase in sense_phrases(meaning.lower()):
        hits, count = score_phrase(phrase, candidate_lower)
        matched.extend(hits)
        total += count

    matched_count = len(matched)
    ratio = percentage(matched_count, total)
    is_accurate = total > 0 and matched_count * 100 >= threshold * total

    script_match = None
    if reference.native_script:
        script_match = reference.native_script in candidate

    word_match = None
    headword = (reference.headword or "").strip()
    if headword:
        word_match = headword.lower() in candidate_lower

    return VerificationResult(
        headword=reference.headword,
        canonical_meaning=reference.canonical_meaning,
        candidate_text=candidate,
        matched_tokens=_dedupe(matched),
        matched_count=matched_count,
        total_words=total,
        match_percentage=round_half_up(ratio),
        is_accurate=is_accurate,
        script_match=script_match,
        word_match=word_match,
    )
