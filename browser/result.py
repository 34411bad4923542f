from dataclasses import dataclass, field
from typing import List, Optional

from suite.test import TestStatus


@dataclass
class CaseResult:
    name: str
    category: str
    status: TestStatus
    failure_kind: Optional[str] = None   # error class name, e.g. TimeoutFailure
    reason: Optional[str] = None
    actual: Optional[str] = None
    expected: Optional[str] = None
    attempts: int = 0
    duration_s: float = 0.0

    @property
    def passed(self) -> bool:
        return self.status == TestStatus.PASSED


@dataclass
class SuiteResult:
    cases: List[CaseResult] = field(default_factory=list)

    @property
    def passed(self) -> List[CaseResult]:
        return [c for c in self.cases if c.status == TestStatus.PASSED]

    @property
    def failed(self) -> List[CaseResult]:
        return [c for c in self.cases if c.status == TestStatus.FAILED]

    @property
    def skipped(self) -> List[CaseResult]:
        return [c for c in self.cases if c.status == TestStatus.SKIPPED]

    @property
    def all_passed(self) -> bool:
        return bool(self.cases) and len(self.passed) == len(self.cases)
