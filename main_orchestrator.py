# main_orchestrator.py
import argparse
import asyncio
import logging
import sys

from browser.session import BrowserSession
from config import config
from runner.orchestrator import TestOrchestrator
from runner.testcase_executor import TestCaseExecutor
from suite.dsl_models import CATEGORIES
from suite.testcase_loader import TestCaseLoader


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run Singlish → Sinhala translator UI testcases")
    parser.add_argument("--suite", action="append", help="suite file under the testcase dir (repeatable)")
    parser.add_argument("--case", action="append", help="testcase name, e.g. Pos_Fun_0004 (repeatable)")
    parser.add_argument("--category", choices=CATEGORIES)
    parser.add_argument("--testcase-dir", default=config.TESTCASE_DIR)
    parser.add_argument("--concurrency", type=int, default=config.CONCURRENCY)
    parser.add_argument("--fail-fast", action="store_true")
    parser.add_argument("--headed", action="store_true", help="show the browser window")
    return parser


def print_summary(suite) -> None:
    print()
    for result in suite.cases:
        line = f"{result.status.value.upper():8} {result.name:14} {result.duration_s:7.2f}s"
        if result.failure_kind:
            line += f"  [{result.failure_kind}] {result.reason}"
        print(line)
    print(f"\n{len(suite.passed)} passed, {len(suite.failed)} failed, {len(suite.skipped)} skipped")


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    loader = TestCaseLoader(testcase_dir=args.testcase_dir)
    testcases = loader.select(suites=args.suite, names=args.case, category=args.category)
    if not testcases:
        print("No testcases selected")
        return 1

    headless = False if args.headed else None
    executor = TestCaseExecutor(session_factory=lambda: BrowserSession(headless=headless))
    orchestrator = TestOrchestrator(
        executor,
        loader=loader,
        concurrency=args.concurrency,
        fail_fast=args.fail_fast,
    )

    suite = await orchestrator.run(testcases)
    print_summary(suite)
    return 0 if suite.all_passed else 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
