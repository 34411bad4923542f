# suite/testcase_loader.py
import glob
import os
from typing import Iterable, List, Optional

from suite.testcase_parser import parse_testcases
from suite.dsl_models import TestCase


class TestCaseLoader:
    __test__ = False

    def __init__(self, testcase_dir: str):
        self.testcase_dir = testcase_dir

    def load(self, suite_name: str) -> List[TestCase]:
        """
        Load one suite file and return its TestCase objects
        """
        if not suite_name.endswith(".txt"):
            filename = f"{suite_name}.txt"
        else:
            filename = suite_name

        path = os.path.join(self.testcase_dir, filename)

        if not os.path.exists(path):
            raise FileNotFoundError(f"Testcase suite not found: {path}")

        with open(path, encoding="utf-8") as f:
            content = f.read()

        try:
            return parse_testcases(content)
        except ValueError as e:
            raise ValueError(f"{path}: {e}") from e

    def load_all(self) -> List[TestCase]:
        cases: List[TestCase] = []
        for path in sorted(glob.glob(os.path.join(self.testcase_dir, "*.txt"))):
            cases.extend(self.load(os.path.basename(path)))
        self._check_unique(cases)
        return cases

    def select(
        self,
        suites: Optional[Iterable[str]] = None,
        names: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
    ) -> List[TestCase]:
        if suites:
            cases = [case for suite in suites for case in self.load(suite)]
            self._check_unique(cases)
        else:
            cases = self.load_all()

        if names:
            wanted = set(names)
            missing = wanted - {case.name for case in cases}
            if missing:
                raise KeyError(f"Unknown testcase(s): {', '.join(sorted(missing))}")
            cases = [case for case in cases if case.name in wanted]

        if category:
            cases = [case for case in cases if case.category == category]

        return cases

    @staticmethod
    def _check_unique(cases: List[TestCase]):
        seen = set()
        for case in cases:
            if case.name in seen:
                raise ValueError(f"Duplicate testcase name: {case.name}")
            seen.add(case.name)
