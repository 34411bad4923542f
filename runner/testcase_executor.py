# runner/testcase_executor.py
import asyncio
import logging
import time
from typing import Callable, Optional

from browser.assertions import check_all
from browser.errors import AssertionMismatch, HarnessError, TimeoutFailure
from browser.output_waiter import AsyncOutputWaiter, WaitPolicy
from browser.result import CaseResult
from browser.session import BrowserSession, prepare_page
from suite.dsl_models import TestCase
from suite.test import TestStatus

logger = logging.getLogger(__name__)


class TestCaseExecutor:
    """
    Runs a single TestCase in a browser session of its own.

    ``session_factory`` returns an async context manager yielding a page and
    ``prepare`` turns that page into (input, output) handles; both are
    swappable so the runner can be exercised without a browser.
    """

    __test__ = False

    def __init__(
        self,
        policy: Optional[WaitPolicy] = None,
        session_factory: Callable = BrowserSession,
        prepare: Callable = prepare_page,
        sleep=asyncio.sleep,
        clock=time.monotonic,
    ):
        self.policy = policy or WaitPolicy()
        self.session_factory = session_factory
        self.prepare = prepare
        self.sleep = sleep
        self.clock = clock

    async def execute(self, testcase: TestCase) -> CaseResult:
        logger.info(f"▶ Executing testcase: {testcase.label}")
        started = time.monotonic()
        waiter = AsyncOutputWaiter(
            self.policy.with_overrides(testcase.max_attempts, testcase.poll_interval_ms),
            sleep=self.sleep,
            clock=self.clock,
        )
        actual = None

        try:
            async with self.session_factory() as page:
                input_field, output = await self.prepare(page)
                handle = await waiter.wait_for_translation(
                    input_field,
                    output,
                    testcase.input_text,
                    typing_delay_ms=testcase.typing_delay_ms,
                )
                actual = await handle.text_content(timeout=self.policy.read_timeout_ms)
                check_all(actual, testcase.expectations)

        except AssertionMismatch as e:
            logger.error(f"❌ FAILED: {testcase.name}: expected {e.expected!r}, got {e.actual!r}")
            return self._result(testcase, TestStatus.FAILED, started, waiter, error=e, actual=e.actual, expected=e.expected)

        except TimeoutFailure as e:
            logger.error(f"❌ FAILED: {testcase.name}: {e}")
            return self._result(testcase, TestStatus.FAILED, started, waiter, error=e, actual=e.last_text)

        except HarnessError as e:
            logger.error(f"❌ FAILED: {testcase.name}: {e}")
            return self._result(testcase, TestStatus.FAILED, started, waiter, error=e)

        except Exception as e:
            logger.exception(f"Testcase execution error: {testcase.name} → {e}")
            return self._result(testcase, TestStatus.FAILED, started, waiter, error=e, kind="Error")

        logger.info(f"✅ PASSED: {testcase.name}")
        return self._result(testcase, TestStatus.PASSED, started, waiter, actual=actual)

    def _result(self, testcase, status, started, waiter, error=None, kind=None, actual=None, expected=None) -> CaseResult:
        if expected is None and testcase.expectations:
            expected = testcase.expectations[0].value
        return CaseResult(
            name=testcase.name,
            category=testcase.category,
            status=status,
            failure_kind=kind or (type(error).__name__ if error else None),
            reason=str(error) if error else None,
            actual=actual,
            expected=expected,
            attempts=waiter.state.attempts_made if waiter.state else 0,
            duration_s=round(time.monotonic() - started, 3),
        )
