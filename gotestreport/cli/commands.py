from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from gotestreport.config import (
    ConfigError,
    Inputs,
    OmitOption,
    inputs_from_env,
    load_inputs,
)
from gotestreport.events import parse_events
from gotestreport.gomod import find_module_name
from gotestreport.logging import get_logger, set_global_log_level
from gotestreport.render import SummaryRenderer, write_summary
from gotestreport.results import PackageResult, Summary, aggregate

from .args import build_parser

logger = get_logger(__name__)


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        set_global_log_level(getattr(logging, args.log_level))

        match args.command:
            case "summary":
                return cmd_summary(args)
            case "packages":
                return cmd_packages(args)
            case _:
                return 2

    except (ConfigError, OSError, UnicodeDecodeError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_summary(args: argparse.Namespace) -> int:
    inputs = _inputs_from(args)
    summary = _summarize(inputs)

    stderr = ""
    if inputs.stderr_file:
        stderr = Path(inputs.stderr_file).read_text(
            encoding="utf-8", errors="replace"
        )

    renderer = SummaryRenderer(
        summary,
        inputs,
        module_name=find_module_name(inputs.module_directory),
        stderr=stderr,
    )
    markdown = renderer.render()
    if markdown:
        write_summary(markdown, inputs.summary_file)
    return 0


def cmd_packages(args: argparse.Namespace) -> int:
    inputs = _inputs_from(args)
    summary = _summarize(inputs)
    _print_summary(summary)
    return 1 if summary.failed_packages() else 0


def _inputs_from(args: argparse.Namespace) -> Inputs:
    inputs = Inputs()
    if args.config:
        inputs = load_inputs(args.config, inputs)
    inputs = inputs_from_env(os.environ, inputs)

    if args.from_json_file:
        inputs.from_json_file = args.from_json_file
    if args.stderr_file:
        inputs.stderr_file = args.stderr_file
    if args.module_directory:
        inputs.module_directory = args.module_directory
    if getattr(args, "summary_file", None):
        inputs.summary_file = args.summary_file
    for option in getattr(args, "omit", []):
        inputs.omit.add(OmitOption(option))

    return inputs


def _summarize(inputs: Inputs) -> Summary:
    if inputs.from_json_file in (None, "-"):
        stdout = sys.stdin.read()
    else:
        stdout = Path(inputs.from_json_file).read_text(
            encoding="utf-8", errors="replace"
        )

    events = parse_events(stdout)
    logger.info("parsed %d events", len(events))
    return aggregate(events)


def _print_summary(summary: Summary) -> None:
    for result in summary:
        verdict = result.package_event.action.upper()
        print(f"{verdict} {result.package}, {_counts(result)}")

    totals = summary.totals
    print(
        f"TOTAL {summary.test_count()} tests, {totals['pass']} passed, "
        f"{totals['fail']} failed, {totals['skip']} skipped"
    )


def _counts(result: PackageResult) -> str:
    conclusions = result.conclusions
    elapsed_ms = (result.package_event.elapsed or 0) * 1000
    return (
        f"{conclusions['pass']} passed, {conclusions['fail']} failed, "
        f"{conclusions['skip']} skipped, {elapsed_ms:.0f}ms"
    )
