#!/usr/bin/env python3
"""Validate local study room allocator environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.domain.models import OutcomeKind
from backend.repository.request_source import RequestSourceRepository
from backend.services.allocation_service import StudyRoomAllocationService
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44

SAMPLE_SOURCE = """3
A Mon 9 11
B Mon 10 12
C Funday 9 10
"""


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="study-rooms-env-")

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_names = ["fastapi", "uvicorn", "pydantic", "httpx", "pytest"]
    import_errors: list[str] = []
    for module_name in package_names:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        source_path = Path(temp_dir) / "input.txt"
        source_path.write_text(SAMPLE_SOURCE, encoding="utf-8")
        settings = replace(
            get_settings(),
            request_source_path=source_path,
            allocation_room_count=1,
        )
        service = StudyRoomAllocationService(
            repository=RequestSourceRepository(settings),
            settings=settings,
        )

        # CHECK 3: Sample allocation run
        try:
            result = service.schedule_from_source()
            kinds = [outcome.kind for outcome in result.outcomes]
            expected = [
                OutcomeKind.INVALID_DAY,
                OutcomeKind.ASSIGNED,
                OutcomeKind.FULLY_BOOKED,
            ]
            if kinds != expected:
                raise RuntimeError(f"unexpected outcomes {[kind.value for kind in kinds]}")
            ok, line = _print_result(
                "Sample allocation",
                True,
                f": {result.assigned_count} assigned, {result.rejected_count} rejected",
            )
        except Exception as exc:
            ok, line = _print_result("Sample allocation", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Study Room Allocator Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
