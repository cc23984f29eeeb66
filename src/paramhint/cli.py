"""Command-line entry point: ``paramhint estimate``."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from paramhint import __version__
from paramhint.config import Settings
from paramhint.inference.estimator import HintEstimate, TypeHintEstimator
from paramhint.inference.search import find_param
from paramhint.logger import EstimateLogger
from paramhint.logging_config import setup_logging
from paramhint.workspace.documents import FileSystemWorkspace, TextDocument


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"paramhint {__version__}")
        return

    if args.command == "estimate":
        _run_estimate(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="paramhint",
        description=(
            "Suggest type hints for a Python parameter "
            "from the code around it."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    estimate = sub.add_parser(
        "estimate",
        help="Estimate type hints for a parameter",
    )
    estimate.add_argument(
        "file",
        type=str,
        help="Python source file containing the parameter",
    )
    estimate.add_argument(
        "--param",
        "-p",
        default=None,
        help="Parameter name",
    )
    estimate.add_argument(
        "--line",
        type=int,
        default=None,
        help=(
            "1-based line of the cursor; the parameter is "
            "read from the text left of --column"
        ),
    )
    estimate.add_argument(
        "--column",
        type=int,
        default=None,
        help="0-based cursor column (default: end of line)",
    )
    estimate.add_argument(
        "--workspace",
        "-w",
        default=None,
        help=(
            "Workspace root searched for hinted parameters "
            "(default: the file's directory)"
        ),
    )
    estimate.add_argument(
        "--no-workspace-search",
        action="store_true",
        help="Only look at the file itself",
    )
    estimate.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of workspace files to search",
    )
    estimate.add_argument(
        "--all",
        "-a",
        action="store_true",
        help="Also list the remaining built-in and typing hints",
    )
    estimate.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    estimate.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def _run_estimate(args: argparse.Namespace) -> None:
    """Execute the estimate command."""
    file_path = Path(args.file).resolve()
    if not file_path.is_file():
        print(f"Error: {file_path} does not exist", file=sys.stderr)
        sys.exit(1)

    overrides: dict[str, object] = {}
    if args.no_workspace_search:
        overrides["workspace_search_enabled"] = False
    if args.limit is not None:
        overrides["workspace_search_limit"] = args.limit
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    settings = Settings(**overrides)  # type: ignore[arg-type]
    setup_logging(settings.log_level)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as exc:
        print(f"Error: cannot read {file_path}: {exc}", file=sys.stderr)
        sys.exit(1)
    document = TextDocument(text, path=file_path)
    param = _resolve_param(args, document)
    if param is None:
        print(
            "Error: no parameter found, pass --param or --line",
            file=sys.stderr,
        )
        sys.exit(1)

    workspace_root = (
        Path(args.workspace).resolve()
        if args.workspace
        else file_path.parent
    )
    estimate_logger = (
        EstimateLogger(settings.log_dir, settings.log_level)
        if settings.log_dir is not None
        else None
    )
    estimator = TypeHintEstimator(
        workspace=FileSystemWorkspace(workspace_root, settings),
        settings=settings,
        estimate_logger=estimate_logger,
    )
    result = asyncio.run(
        estimator.estimate(
            param, document.get_text(), active_document=file_path
        )
    )
    print(_format_result(result, args.format, args.all))


def _resolve_param(
    args: argparse.Namespace, document: TextDocument
) -> str | None:
    """Parameter from --param, or from the cursor at --line/--column."""
    if args.param:
        return args.param
    if args.line is None:
        return None
    try:
        line = document.line_at(args.line - 1)
    except IndexError:
        return None
    column = len(line.text) if args.column is None else args.column
    return find_param(line.text, column)


def _format_result(
    result: HintEstimate, fmt: str, show_all: bool
) -> str:
    """Render an estimate as text lines or JSON."""
    if fmt == "json":
        payload: dict[str, object] = {
            "param": result.param,
            "hints": result.hints,
            "stage": result.stage.value,
        }
        if show_all:
            payload["remaining"] = [t.value for t in result.remaining()]
            payload["remaining_typing"] = result.remaining_typing_hints()
        return json.dumps(payload, indent=2)

    lines = list(result.hints)
    if show_all:
        lines.extend(t.value for t in result.remaining())
        lines.extend(result.remaining_typing_hints())
    if not lines:
        return f"No hints for '{result.param}'"
    return "\n".join(lines)


if __name__ == "__main__":
    main()
