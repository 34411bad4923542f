import re
from typing import Iterable, Optional

from browser.errors import AssertionMismatch
from suite.dsl_models import Expectation


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and trim, as Playwright's to_have_text does."""
    if text is None:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def check_expectation(actual: Optional[str], expectation: Expectation):
    normalized = normalize_text(actual)

    if expectation.kind == "equals":
        ok = normalized == normalize_text(expectation.value)
    elif expectation.kind == "contains":
        ok = normalize_text(expectation.value) in normalized
    elif expectation.kind == "not_empty":
        ok = bool(normalized)
    else:
        raise ValueError(f"Unknown expectation kind: {expectation.kind}")

    if not ok:
        raise AssertionMismatch(expectation.kind, expectation.value, actual)


def check_all(actual: Optional[str], expectations: Iterable[Expectation]):
    for expectation in expectations:
        check_expectation(actual, expectation)
