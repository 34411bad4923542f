import asyncio
import logging
from typing import Dict, Iterable, List

from browser.result import CaseResult, SuiteResult
from suite.dsl_models import TestCase
from suite.test import TestStatus

logger = logging.getLogger(__name__)


class TestOrchestrator:
    __test__ = False

    def __init__(self, executor, loader=None, concurrency: int = 1, fail_fast: bool = False):
        """
        executor → TestCaseExecutor (one isolated session per case)
        loader   → TestCaseLoader, needed only by run_testcase()
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.executor = executor
        self.loader = loader
        self.concurrency = concurrency
        self.fail_fast = fail_fast
        self.results: Dict[str, CaseResult] = {}
        self._stop = False

    async def run(self, testcases: Iterable[TestCase]) -> SuiteResult:
        testcases = list(testcases)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def guarded(testcase: TestCase) -> CaseResult:
            async with semaphore:
                return await self._run_one(testcase)

        logger.info(f"Running {len(testcases)} testcase(s), concurrency={self.concurrency}")
        results: List[CaseResult] = await asyncio.gather(*(guarded(tc) for tc in testcases))
        suite = SuiteResult(cases=list(results))
        logger.info(
            f"Suite finished: {len(suite.passed)} passed, {len(suite.failed)} failed, "
            f"{len(suite.skipped)} skipped"
        )
        return suite

    async def run_testcase(self, testcase_name: str) -> CaseResult:
        # Already executed → reuse result
        if testcase_name in self.results:
            return self.results[testcase_name]
        if self.loader is None:
            raise RuntimeError("run_testcase() needs a loader")

        testcase = next((tc for tc in self.loader.load_all() if tc.name == testcase_name), None)
        if testcase is None:
            raise KeyError(f"Testcase not found: {testcase_name}")
        return await self._run_one(testcase)

    async def _run_one(self, testcase: TestCase) -> CaseResult:
        if testcase.name in self.results:
            return self.results[testcase.name]

        if self._stop:
            result = CaseResult(
                name=testcase.name,
                category=testcase.category,
                status=TestStatus.SKIPPED,
                reason="Skipped after an earlier failure (fail-fast)",
            )
        else:
            result = await self.executor.execute(testcase)
            if self.fail_fast and result.status == TestStatus.FAILED:
                logger.error(f"Stopping after failure of {testcase.name}")
                self._stop = True

        self.results[testcase.name] = result
        return result
