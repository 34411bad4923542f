import asyncio

import pytest

from browser.errors import PreconditionFailure
from browser.output_waiter import WaitPolicy
from runner.testcase_executor import TestCaseExecutor
from suite.dsl_models import Expectation, TestCase
from suite.test import TestStatus
from fakes import FakeInput, TranslatingOutput, session_factory

TRANSLATIONS = {
    "mama heta enavaa.": "මම හෙට එනවා.",
    "oyaalaa enavadha?": "ඔයාලා එනවද?",
    "202520262027": "කිසිදු සිංහල පරිවර්තනයක් නොමැත",
    "mama happy 🙂 ada!": "මම happy 🙂 අද!",
    "mama gedhara yanavaa": "මම ගෙදර යනවා",
}

FAST = WaitPolicy(
    settle_delay_ms=800,
    max_attempts=6,
    poll_interval_ms=500,
    read_timeout_ms=2000,
    stabilize_delay_ms=500,
    fallback_timeout_ms=1000,
)


def case(name, text, *expectations, **kwargs):
    return TestCase(
        name=name,
        category=kwargs.pop("category", "functional-positive"),
        title=kwargs.pop("title", ""),
        input_text=text,
        expectations=tuple(expectations),
        **kwargs,
    )


class Harness:
    """Executor wired to fake sessions whose output translates after ``latency`` seconds."""

    def __init__(self, clock, latency=1.0, prepare_error=None):
        self.clock = clock
        self.pages = []
        self.inputs = []
        self.latency = latency
        self.prepare_error = prepare_error
        self.executor = TestCaseExecutor(
            FAST,
            session_factory=session_factory(self.pages),
            prepare=self.prepare,
            sleep=clock.sleep,
            clock=clock,
        )

    async def prepare(self, page):
        if self.prepare_error:
            raise self.prepare_error
        input_field = FakeInput(self.clock)
        self.inputs.append(input_field)
        return input_field, TranslatingOutput(self.clock, input_field, TRANSLATIONS, self.latency)

    def execute(self, testcase):
        return asyncio.run(self.executor.execute(testcase))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("mama heta enavaa.", "මම හෙට එනවා."),
        ("oyaalaa enavadha?", "ඔයාලා එනවද?"),
        ("202520262027", "කිසිදු සිංහල පරිවර්තනයක් නොමැත"),
        ("mama happy 🙂 ada!", "මම happy 🙂 අද!"),
    ],
)
def test_matching_output_passes(clock, text, expected):
    harness = Harness(clock)

    result = harness.execute(case("Pos", text, Expectation("equals", expected)))

    assert result.status == TestStatus.PASSED
    assert result.passed
    assert result.actual == expected
    assert result.failure_kind is None
    assert harness.pages[0].closed


def test_mismatch_reports_actual_and_expected(clock):
    harness = Harness(clock)

    result = harness.execute(case("Neg_Fun_0005", "mama heta enavaa.", Expectation("equals", "මම හෙට යන්නෙමි.")))

    assert result.status == TestStatus.FAILED
    assert result.failure_kind == "AssertionMismatch"
    assert result.actual == "මම හෙට එනවා."
    assert result.expected == "මම හෙට යන්නෙමි."
    assert harness.pages[0].closed


def test_output_that_never_renders_times_out(clock):
    harness = Harness(clock)

    result = harness.execute(case("Unknown", "no translation for this", Expectation("not_empty")))

    assert result.status == TestStatus.FAILED
    assert result.failure_kind == "TimeoutFailure"
    assert result.actual == ""
    assert result.attempts == FAST.max_attempts
    assert harness.pages[0].closed


def test_precondition_failure_fails_only_this_case(clock):
    harness = Harness(clock, prepare_error=PreconditionFailure("Input not visible", locator="placeholder=x"))

    result = harness.execute(case("Pos", "mama heta enavaa.", Expectation("not_empty")))

    assert result.status == TestStatus.FAILED
    assert result.failure_kind == "PreconditionFailure"
    assert "Input not visible" in result.reason
    assert result.attempts == 0
    assert harness.pages[0].closed


def test_blank_input_is_reported_as_precondition_failure(clock):
    harness = Harness(clock)

    result = harness.execute(case("Blank", "   ", Expectation("not_empty")))

    assert result.failure_kind == "PreconditionFailure"


def test_unexpected_errors_are_reported_not_raised(clock):
    harness = Harness(clock, prepare_error=KeyError("boom"))

    result = harness.execute(case("Pos", "mama heta enavaa.", Expectation("not_empty")))

    assert result.status == TestStatus.FAILED
    assert result.failure_kind == "Error"
    assert harness.pages[0].closed


def test_ui_case_types_and_checks_every_expectation(clock):
    harness = Harness(clock)
    ui = case(
        "Pos_UI_0001",
        "mama gedhara yanavaa",
        Expectation("not_empty"),
        Expectation("contains", "ම"),
        category="ui-behavior",
        typing_delay_ms=80,
    )

    result = harness.execute(ui)

    assert result.status == TestStatus.PASSED
    assert harness.inputs[0].calls[-1] == ("press_sequentially", "mama gedhara yanavaa", 80)


def test_case_overrides_reach_the_waiter(clock):
    harness = Harness(clock, latency=100.0)

    result = harness.execute(case("Slow", "mama heta enavaa.", Expectation("not_empty"), max_attempts=2))

    assert result.failure_kind == "TimeoutFailure"
    assert result.attempts == 2


def test_each_case_gets_its_own_session(clock):
    harness = Harness(clock)

    harness.execute(case("A", "mama heta enavaa.", Expectation("not_empty")))
    harness.execute(case("B", "oyaalaa enavadha?", Expectation("not_empty")))

    assert len(harness.pages) == 2
    assert harness.pages[0] is not harness.pages[1]
    assert all(page.closed for page in harness.pages)
