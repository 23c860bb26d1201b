# util/types.py
from typing import Any, TypedDict


# Flow: Narrow types for the persisted validation report.
class ReportSummary(TypedDict):
    total_tests: int
    passed: int
    failed: int
    pass_rate: str


class ValidationReport(TypedDict):
    generated_at: str
    summary: ReportSummary
    results: list[dict[str, Any]]
