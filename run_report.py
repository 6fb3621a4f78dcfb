#!/usr/bin/env python3
"""
CLI entrypoint: render a saved run record as an HTML report or JSON export.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from logging_utils import get_error_info, log_exception, setup_logging
from renderers.context import ReportMode
from report_builder import build_report


def enable_debug_logging() -> None:
    logging.getLogger().setLevel(logging.DEBUG)
    for handler in logging.getLogger().handlers:
        handler.setLevel(logging.DEBUG)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render an agent run record as a self-contained report.")
    parser.add_argument("run_file", type=str, help="Path to a RunRecord JSON file.")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ReportMode],
        default=ReportMode.STATIC.value,
        help="Static report or one with in-place editing controls.",
    )
    parser.add_argument("--json", action="store_true", help="Emit the raw run JSON export instead of HTML.")
    parser.add_argument("--output", type=str, default=None, help="Write the artifact here instead of stdout.")
    parser.add_argument("--auto-print", action="store_true", help="Open the print dialog when the report loads.")
    parser.add_argument("--memory", type=str, default=None, help="Optional prior memory block JSON file.")
    parser.add_argument("--log-file", type=str, default=None, help="Also write a DEBUG log to this path.")
    parser.add_argument("--debug", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def _read_json(path: str) -> object:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    load_dotenv()

    run_logger = setup_logging(level=logging.INFO, log_file=args.log_file)
    if args.debug:
        enable_debug_logging()
        run_logger.debug("Debug logging enabled.")

    try:
        record = _read_json(args.run_file)
        memory = _read_json(args.memory) if args.memory else None
    except (OSError, ValueError) as exc:
        log_exception(run_logger, exc, context="read_run_file", path=args.run_file)
        sys.exit(1)

    if not isinstance(record, dict):
        run_logger.error(f"❌ {args.run_file} does not hold a run record object.")
        sys.exit(1)

    try:
        artifacts = build_report(record, mode=args.mode, memory=memory, auto_print=args.auto_print)
    except ValidationError as exc:
        log_exception(run_logger, exc, context="build_report", run_id=record.get("id"))
        run_logger.debug(f"Error info: {get_error_info(exc, {'run_file': args.run_file})}")
        run_logger.error("❌ Invalid run record.")
        sys.exit(1)
    except Exception as exc:
        log_exception(run_logger, exc, context="build_report", run_id=record.get("id"))
        run_logger.error("❌ Report generation failed.")
        sys.exit(1)

    content = artifacts.json_export if args.json else artifacts.html
    if args.output:
        try:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            log_exception(run_logger, exc, context="write_output", path=args.output)
            sys.exit(1)
        run_logger.info(f"✅ Report written to {output_path}")
    else:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
