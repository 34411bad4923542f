from pathlib import Path

import pytest

from browser.output_waiter import WaitPolicy
from fakes import FakeClock, FakeInput

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def input_field(clock):
    return FakeInput(clock)


@pytest.fixture
def policy():
    """The production timings, pinned so env overrides do not leak into tests."""
    return WaitPolicy(
        settle_delay_ms=800,
        max_attempts=60,
        poll_interval_ms=500,
        read_timeout_ms=2000,
        stabilize_delay_ms=500,
        fallback_timeout_ms=10000,
    )


@pytest.fixture
def testcase_dir():
    return str(REPO_ROOT / "testcases")
