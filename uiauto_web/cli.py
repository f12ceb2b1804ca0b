# uiauto_web/cli.py
"""
@file cli.py
@brief Command-line interface for uiauto-web.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .actionlogger import ACTION_LOGGER
from .config import RunConfig
from .edge_cases import EdgeCaseRunner
from .logsetup import setup_logging
from .repository import StrategyRepository
from .runner import StrategyRunner
from .session import BrowserSession

TARGET_ENV = "TARGET_HTML_FILE"


def _resolve_timing_options(args: argparse.Namespace) -> tuple[str, Dict[str, Any]]:
    """Resolve timing preset and CLI overrides."""
    preset = "default"
    if getattr(args, "ci", False):
        preset = "ci"
    elif getattr(args, "fast", False):
        preset = "fast"
    elif getattr(args, "slow", False):
        preset = "slow"

    overrides: Dict[str, Any] = {}
    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        overrides = {
            "default_timeout": timeout,
            "navigation_timeout": timeout,
        }
    return preset, overrides


def _configure_action_logger_from_env() -> None:
    """Configure step event logging from environment variables."""
    enabled = os.getenv("UIAUTO_WEB_ACTION_LOGGING", "").lower() in {"1", "true", "yes", "on"}
    if not enabled:
        ACTION_LOGGER.disable()
        return

    ACTION_LOGGER.configure(
        console=True,
        file_path=os.getenv("UIAUTO_WEB_ACTION_LOG_FILE"),
        level=os.getenv("UIAUTO_WEB_ACTION_LOG_LEVEL", "INFO"),
        format=os.getenv("UIAUTO_WEB_ACTION_LOG_FORMAT", "line"),
    )
    ACTION_LOGGER.enable()


def _build_runner(args: argparse.Namespace) -> StrategyRunner:
    repo = StrategyRepository.load(args.strategies)
    preset, overrides = _resolve_timing_options(args)
    config = RunConfig.build_from(preset=preset, file_settings=repo.settings, overrides=overrides)
    return StrategyRunner(repo, html_dir=args.html_dir, visuals_dir=args.out, config=config)


def _print_batch_summary(summary: Dict[str, Any]) -> None:
    print("\nBatch Summary")
    print("-" * 80)
    print(f"{'#':<4} {'Status':<8} {'Shots':<6} {'Type':<24} File")
    for idx, item in enumerate(summary.get("results", []), start=1):
        status = str(item.get("status", "unknown")).upper()
        print(f"{idx:<4} {status:<8} {item.get('screenshots', 0):<6} {str(item.get('application_type')):<24} {item.get('file')}")
        if item.get("error"):
            print(f"      Error: {item['error']}")
    print("-" * 80)
    print(
        f"Files: {summary['total_files']}  Screenshots: {summary['total_screenshots']}  "
        f"Success rate: {summary['success_rate']}"
    )


async def _run(args: argparse.Namespace) -> int:
    runner = _build_runner(args)
    target = args.file or os.getenv(TARGET_ENV)

    async with BrowserSession(
        browser=args.browser,
        headless=not args.headed,
        default_timeout=runner.config.timing.default_timeout,
    ) as page:
        if target:
            report = await runner.run_file(page, target)
            print(f"\n{target}: {report['application_type']} -> "
                  f"{report['total_screenshots']} screenshots, {report['total_steps']} steps")
            print(f"Report: {os.path.join(report['screenshot_folder'], 'strategy_test_report.json')}")
            return 0

        summary = await runner.run_batch(page, summary_path=args.summary_json)

    _print_batch_summary(summary)
    return 0 if summary["success_count"] == summary["total_files"] else 2


async def _edge_cases(args: argparse.Namespace) -> int:
    runner = _build_runner(args)
    edge = EdgeCaseRunner(runner)
    async with BrowserSession(
        browser=args.browser,
        headless=not args.headed,
        default_timeout=runner.config.timing.default_timeout,
    ) as page:
        outcomes = await edge.run(page, files=[args.file] if args.file else None)

    for item in outcomes:
        print(f"{str(item.get('status')).upper():<8} {item.get('file')} screenshots={item.get('screenshots', 0)}")
    return 0 if all(o.get("status") == "success" for o in outcomes) else 2


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--strategies", "-c", default="test-strategies.json", help="Path to the strategy file (JSON or YAML)")
    p.add_argument("--html-dir", default="html", help="Folder containing the target *.html files")


def _add_browser(p: argparse.ArgumentParser) -> None:
    p.add_argument("--out", "-o", default="visuals", help="Output folder for screenshots and reports")
    p.add_argument("--file", "-f", default=None, help=f"Run a single HTML file (default: ${TARGET_ENV})")
    p.add_argument("--browser", default="chromium", choices=["chromium", "firefox", "webkit"], help="Browser engine")
    p.add_argument("--headed", action="store_true", help="Show the browser window")
    p.add_argument("--timeout", "-t", type=int, default=None, help="Override Playwright timeouts (ms)")
    p.add_argument("--ci", action="store_true", help="Use CI-oriented wait settings")
    p.add_argument("--fast", action="store_true", help="Use short settle waits for local development")
    p.add_argument("--slow", action="store_true", help="Use long settle waits for slow pages")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]

    p = argparse.ArgumentParser(
        prog="uiauto-web",
        description="uiauto-web - strategy-driven interaction runner for static HTML demos",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Debug-level console logging")
    p.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = p.add_subparsers(dest="cmd", required=True)

    runp = sub.add_parser("run", help="Run strategies against every HTML file (or one file)")
    _add_common(runp)
    _add_browser(runp)
    runp.add_argument("--summary-json", default=None, help="Batch summary path (default: <out>/intelligent_test_summary.json)")

    edgep = sub.add_parser("edge-cases", help="Run the tree edge-case insert pass")
    _add_common(edgep)
    _add_browser(edgep)

    valp = sub.add_parser("validate", help="Validate the strategy file")
    valp.add_argument("--strategies", "-c", default="test-strategies.json", help="Path to the strategy file")

    listp = sub.add_parser("list-strategies", help="List strategies and element roles")
    listp.add_argument("--strategies", "-c", default="test-strategies.json", help="Path to the strategy file")

    detp = sub.add_parser("detect", help="Print the strategy detected for each HTML file")
    _add_common(detp)
    detp.add_argument("files", nargs="+", help="HTML file names (relative to --html-dir)")

    args = p.parse_args(argv)

    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
    )
    _configure_action_logger_from_env()

    if args.cmd in ("run", "edge-cases") and sum(bool(x) for x in (args.ci, args.fast, args.slow)) > 1:
        print("Error: --ci, --fast and --slow are mutually exclusive", file=sys.stderr)
        return 1

    if args.cmd == "run":
        try:
            return asyncio.run(_run(args))
        except Exception as e:
            print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
            return 2

    if args.cmd == "edge-cases":
        try:
            return asyncio.run(_edge_cases(args))
        except Exception as e:
            print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
            return 2

    if args.cmd == "validate":
        try:
            repo = StrategyRepository(args.strategies)
        except Exception as e:
            print(f"X Strategy file is invalid: {e}", file=sys.stderr)
            return 2
        names = repo.list_strategies()
        steps = sum(repo.get_strategy(n).total_steps for n in names)
        print(f"+ Strategy file is valid: {args.strategies}")
        print(f"  - Strategies: {len(names)}")
        print(f"  - Steps: {steps}")
        print(f"  - Element roles: {len(repo.list_roles())}")
        return 0

    if args.cmd == "list-strategies":
        repo = StrategyRepository.load(args.strategies)
        names = repo.list_strategies()
        print(f"Strategies ({len(names)}):")
        for name in names:
            strategy = repo.get_strategy(name)
            print(f"  - {name}: {strategy.description}")
            if strategy.file_patterns:
                print(f"      patterns: {', '.join(strategy.file_patterns)}")
            if strategy.content_keywords:
                print(f"      keywords: {', '.join(strategy.content_keywords)}")
        roles = repo.list_roles()
        print(f"\nElement roles ({len(roles)}):")
        for role in roles:
            print(f"  - {role}: {json.dumps(repo.selectors_for(role))}")
        return 0

    if args.cmd == "detect":
        repo = StrategyRepository.load(args.strategies)
        runner = StrategyRunner(repo, html_dir=args.html_dir)
        for name in args.files:
            print(f"{name}\t{runner.detect(name)}")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
