import asyncio

import main_orchestrator
from browser.result import CaseResult
from suite.test import TestStatus


class StubExecutor:
    failing = set()

    def __init__(self, *args, **kwargs):
        pass

    async def execute(self, testcase):
        status = TestStatus.FAILED if testcase.name in self.failing else TestStatus.PASSED
        return CaseResult(name=testcase.name, category=testcase.category, status=status)


def test_parser_defaults():
    args = main_orchestrator.build_parser().parse_args([])

    assert args.suite is None
    assert args.case is None
    assert not args.fail_fast
    assert not args.headed


def test_main_returns_zero_when_all_pass(monkeypatch, testcase_dir, capsys):
    monkeypatch.setattr(main_orchestrator, "TestCaseExecutor", StubExecutor)

    code = asyncio.run(main_orchestrator.main(["--testcase-dir", testcase_dir, "--category", "ui-behavior"]))

    assert code == 0
    out = capsys.readouterr().out
    assert "Pos_UI_0001" in out
    assert "1 passed, 0 failed, 0 skipped" in out


def test_main_returns_one_on_failure(monkeypatch, testcase_dir, capsys):
    class Failing(StubExecutor):
        failing = {"Neg_Fun_0010"}

    monkeypatch.setattr(main_orchestrator, "TestCaseExecutor", Failing)

    code = asyncio.run(
        main_orchestrator.main(
            ["--testcase-dir", testcase_dir, "--case", "Neg_Fun_0010", "--case", "Pos_Fun_0004"]
        )
    )

    assert code == 1
    assert "1 passed, 1 failed, 0 skipped" in capsys.readouterr().out


def test_main_with_nothing_selected(tmp_path, capsys):
    code = asyncio.run(main_orchestrator.main(["--testcase-dir", str(tmp_path)]))

    assert code == 1
    assert "No testcases selected" in capsys.readouterr().out
