# suite/testcase_parser.py
import json
from typing import List, Optional

from suite.dsl_models import CATEGORIES, Expectation, TestCase


def _value(line: str, directive: str) -> str:
    """
    Text after the directive. A value wrapped in double quotes is decoded as
    a JSON string so fixtures can carry escapes and significant whitespace.
    """
    raw = line[len(directive):].strip()
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        try:
            return json.loads(raw)
        except ValueError:
            raise ValueError(f"Bad quoted value: {line}")
    return raw


def _int_value(line: str, default: Optional[int]) -> Optional[int]:
    try:
        return int(line.split()[1])
    except Exception:
        return default


class _Draft:
    def __init__(self, name: str):
        self.name = name
        self.category = None
        self.title = ""
        self.input_text = None
        self.expectations: List[Expectation] = []
        self.typing_delay_ms = None
        self.max_attempts = None
        self.poll_interval_ms = None

    def build(self) -> TestCase:
        if self.input_text is None:
            raise ValueError(f"Testcase {self.name} has no @input")
        if not self.expectations:
            raise ValueError(f"Testcase {self.name} has no expectation")
        if self.category not in CATEGORIES:
            raise ValueError(f"Testcase {self.name} has unknown category: {self.category}")
        return TestCase(
            name=self.name,
            category=self.category,
            title=self.title,
            input_text=self.input_text,
            expectations=tuple(self.expectations),
            typing_delay_ms=self.typing_delay_ms,
            max_attempts=self.max_attempts,
            poll_interval_ms=self.poll_interval_ms,
        )


def parse_testcases(text: str) -> List[TestCase]:
    lines = [l.strip() for l in text.splitlines() if l.strip()]

    cases: List[TestCase] = []
    current: Optional[_Draft] = None

    for line in lines:
        if line.startswith("#"):
            continue

        directive = line.split(maxsplit=1)[0]

        if directive == "@testcase":
            if current:
                cases.append(current.build())
            parts = line.split()
            if len(parts) < 2:
                raise ValueError(f"@testcase needs a name: {line}")
            current = _Draft(parts[1])
            continue

        if current is None:
            raise ValueError(f"Directive outside a testcase: {line}")

        if directive == "@expect_not_empty":
            current.expectations.append(Expectation("not_empty"))

        elif directive == "@expect_contains":
            current.expectations.append(Expectation("contains", _value(line, "@expect_contains")))

        elif directive == "@expect":
            current.expectations.append(Expectation("equals", _value(line, "@expect")))

        elif directive == "@category":
            current.category = _value(line, "@category")

        elif directive == "@title":
            current.title = _value(line, "@title")

        elif directive == "@input":
            current.input_text = _value(line, "@input")

        elif directive == "@typing":
            current.typing_delay_ms = _int_value(line, None)

        elif directive == "@max_attempts":
            current.max_attempts = _int_value(line, None)

        elif directive == "@poll_interval":
            current.poll_interval_ms = _int_value(line, None)

        else:
            raise ValueError(f"Unknown directive: {line}")

    if current:
        cases.append(current.build())

    return cases
