"""Command-line entry point: read a request file, allocate rooms, print the report.

    study-rooms input.txt --rooms 10
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from backend.repository.request_source import (
    RequestSourceFormatError,
    SourceUnavailableError,
)
from backend.services.allocation_service import (
    AllocationValidationError,
    StudyRoomAllocationService,
)
from backend.services.report_service import render_report
from backend.utils.config import get_settings
from backend.utils.logger import configure_logging


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="study-rooms",
        description="Assign study group requests to rooms without overlapping bookings.",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        type=Path,
        default=None,
        help="Request file (defaults to REQUEST_SOURCE_PATH or input.txt)",
    )
    parser.add_argument(
        "--rooms",
        type=int,
        default=None,
        help="Number of rooms to allocate from (defaults to ROOM_COUNT or 10)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for diagnostics written to stderr",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    service = StudyRoomAllocationService(settings=get_settings())
    try:
        result = service.schedule_from_source(args.input_file, room_count=args.rooms)
    except SourceUnavailableError:
        print("File opening error!", file=sys.stderr)
        return 1
    except (RequestSourceFormatError, AllocationValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for line in render_report(result):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
