# suite/dsl_models.py
from dataclasses import dataclass
from typing import Optional, Tuple

CATEGORIES = ("functional-positive", "functional-negative", "ui-behavior")
EXPECTATION_KINDS = ("equals", "contains", "not_empty")


@dataclass(frozen=True)
class Expectation:
    kind: str          # equals | contains | not_empty
    value: str = ""


@dataclass(frozen=True)
class TestCase:
    name: str
    category: str
    title: str
    input_text: str
    expectations: Tuple[Expectation, ...]
    # Type character by character with this delay instead of filling
    typing_delay_ms: Optional[int] = None
    # Per-case polling overrides
    max_attempts: Optional[int] = None
    poll_interval_ms: Optional[int] = None

    __test__ = False  # not a pytest class

    @property
    def label(self) -> str:
        return f"{self.name}: {self.title}" if self.title else self.name
