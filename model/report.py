# model/report.py
from pydantic import BaseModel


class ValidationRecord(BaseModel):
    """
    One row of the validation report: echoed verification fields plus the
    test metadata. Failed upstream calls carry `error` and no scores.
    """

    test_id: str
    entry_number: int | None = None
    input_query: str
    passed: bool = False

    headword: str | None = None
    canonical_meaning: str | None = None
    candidate_text: str | None = None
    matched_tokens: list[str] = []
    matched_count: int = 0
    total_words: int = 0
    match_percentage: int = 0
    is_accurate: bool = False
    word_match: bool | None = None
    script_match: bool | None = None

    provider: str | None = None
    model: str | None = None
    latency_ms: int | None = None
    error: str | None = None
