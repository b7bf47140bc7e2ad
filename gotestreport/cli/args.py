from __future__ import annotations

import argparse

from gotestreport.config import OmitOption


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gotestreport")

    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (.yaml/.yml, .toml, .json)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for messages written to stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # summary
    summary = subparsers.add_parser("summary", help="Render a job summary")
    _add_input_arguments(summary)
    summary.add_argument(
        "--summary-file",
        default=None,
        help="Append the summary to this file instead of printing it",
    )
    summary.add_argument(
        "--omit",
        nargs="+",
        default=[],
        choices=OmitOption.values(),
        help="Parts of the summary to leave out",
    )

    # packages
    packages = subparsers.add_parser("packages", help="List package results")
    _add_input_arguments(packages)

    return parser


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--from-json-file",
        default=None,
        help="File holding `go test -json` output, '-' for stdin",
    )
    parser.add_argument(
        "--stderr-file",
        default=None,
        help="File holding the stderr of the test run",
    )
    parser.add_argument(
        "--module-directory",
        default=None,
        help="Directory containing go.mod",
    )
