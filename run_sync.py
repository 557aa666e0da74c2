#!/usr/bin/env python3
"""
Registry Synchronization Script.

Compares the lessons of a computed schedule with the lesson records of one
online registry page and plans the create/update/delete requests that bring
the registry in line with the schedule. The plan is run against a dry-run
gateway and saved as a report.

Usage:
    python run_sync.py --lessons LESSONS.json --weeks WEEKS.csv --existing PAGE.html
                       [--start YYYY-MM-DD] [--end YYYY-MM-DD]
                       [--course C] [--group G] [--sub-group S]
                       [--extra-lessons leave_alone|delete]

Examples:
    # Plan the autumn semester for one group from a saved registry page
    python run_sync.py --lessons schedule/lessons.json --weeks schedule/weeks.csv \\
        --existing registry/algebra.html --course Algebra --group IA2201

    # Only September, and remove records that match no lesson
    python run_sync.py --lessons schedule/lessons.json --weeks schedule/weeks.csv \\
        --existing registry/algebra.json --start 2024-09-01 --end 2024-09-30 \\
        --extra-lessons delete
"""

import sys
import argparse
import logging
from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from registry_sync.matching.reconciliation import reconcile
from registry_sync.models.command import SyncCommand
from registry_sync.models.schema_version import VersionedReport
from registry_sync.registry.applier import (
    ApplyReport,
    CommandApplier,
    ExtraLessonAction,
    RegistryRequestError,
)
from registry_sync.registry.interfaces import DryRunRegistryGateway
from registry_sync.registry.snapshot import filter_window, load_existing_occurrences
from registry_sync.resilience.circuit_breaker import CircuitBreaker
from registry_sync.schedule.expansion import (
    StudyWeekDateProvider,
    expand_scheduled_occurrences,
    select_lessons,
)
from registry_sync.schedule.loader import load_regular_lessons, load_study_weeks
from registry_sync.schedule.time_config import LessonTimeConfig
from registry_sync.utils.config import config
from registry_sync.utils.file_utils import generate_filename, save_csv, save_json
from registry_sync.utils.logger import setup_logger


LOG_FILENAME = "sync.log"


def parse_arguments(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Synchronize a computed schedule with the online registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--lessons",
        required=True,
        type=Path,
        help="JSON file with the recurring lessons"
    )

    parser.add_argument(
        "--weeks",
        required=True,
        type=Path,
        help="CSV file with study weeks (monday_date,is_odd_week)"
    )

    parser.add_argument(
        "--existing",
        required=True,
        type=Path,
        help="Saved registry lessons page (.html) or JSON export"
    )

    parser.add_argument(
        "--start",
        type=parse_date,
        help="First date to synchronize, YYYY-MM-DD (inclusive)"
    )

    parser.add_argument(
        "--end",
        type=parse_date,
        help="Last date to synchronize, YYYY-MM-DD (inclusive)"
    )

    parser.add_argument("--course", help="Only lessons of this course")
    parser.add_argument("--group", help="Only lessons of this group")
    parser.add_argument("--sub-group", help="Only lessons of this sub-group")

    parser.add_argument(
        "--extra-lessons",
        choices=[action.value for action in ExtraLessonAction],
        help="What to do with registry records that match no lesson "
             "(overrides EXTRA_LESSON_ACTION, default: leave_alone)"
    )

    parser.add_argument(
        "--base-url",
        help="Registry base URL for resolving links (overrides REGISTRY_BASE_URL)"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for reports/ and logs/ (overrides OUTPUT_DIR)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides LOG_LEVEL)"
    )

    return parser.parse_args(argv)


def parse_date(value: str) -> date:
    """
    Parse a YYYY-MM-DD command-line date.

    Raises:
        argparse.ArgumentTypeError: If the format is invalid
    """
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}' (expected YYYY-MM-DD)")


def display_summary(commands: List[SyncCommand], scheduled_count: int, existing_count: int):
    """Print the planned commands."""
    counts = Counter(command.type.name for command in commands)

    print("\n" + "=" * 60)
    print("SYNCHRONIZATION PLAN")
    print("=" * 60)
    print(f"Scheduled occurrences:    {scheduled_count}")
    print(f"Registry records:         {existing_count}")
    print(f"To create:                {counts['CREATE']}")
    print(f"To update:                {counts['UPDATE']}")
    print(f"Extra records:            {counts['DELETE']}")
    print("=" * 60)

    if commands:
        print("\nCommands:")
        print("-" * 60)
        for idx, command in enumerate(commands, 1):
            print(f"{idx:3d}. {describe_command(command)}")
        print("-" * 60)


def describe_command(command: SyncCommand) -> str:
    """One-line description of a command."""
    if command.has_scheduled and command.has_existing:
        return (
            f"UPDATE {command.existing.date_time:%Y-%m-%d %H:%M} "
            f"{command.existing.kind.value} -> "
            f"{command.scheduled.date_time:%Y-%m-%d %H:%M} {command.scheduled.kind.value}"
        )
    if command.has_scheduled:
        return (
            f"CREATE {command.scheduled.date_time:%Y-%m-%d %H:%M} "
            f"{command.scheduled.kind.value} ({command.scheduled.lesson_id})"
        )
    return (
        f"DELETE {command.existing.date_time:%Y-%m-%d %H:%M} "
        f"{command.existing.kind.value} ({command.existing.edit_ref})"
    )


def save_execution_report(
    output_dir: Path,
    args,
    commands: List[SyncCommand],
    report: ApplyReport,
    extra_lesson_action: ExtraLessonAction
) -> Path:
    """
    Save the JSON report and the CSV list of commands.

    Returns:
        Path of the JSON report
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    data = {
        "timestamp": datetime.now().isoformat(),
        "inputs": {
            "lessons": str(args.lessons),
            "weeks": str(args.weeks),
            "existing": str(args.existing),
            "start": args.start.isoformat() if args.start else None,
            "end": args.end.isoformat() if args.end else None,
            "course": args.course,
            "group": args.group,
            "sub_group": args.sub_group,
        },
        "extra_lesson_action": extra_lesson_action.value,
        "dry_run": True,
        "summary": report.to_dict(),
        "commands": [command.to_dict() for command in commands],
    }

    json_path = output_dir / generate_filename("sync_report", "json")
    save_json(VersionedReport(data=data).to_dict(), json_path)
    print(f"\nReport saved to: {json_path}")

    if commands:
        rows = [
            {
                "type": command.type.value,
                "lesson_id": command.scheduled.lesson_id if command.has_scheduled else None,
                "scheduled_date_time": (
                    command.scheduled.date_time.isoformat() if command.has_scheduled else None
                ),
                "scheduled_kind": command.scheduled.kind.value if command.has_scheduled else None,
                "existing_date_time": (
                    command.existing.date_time.isoformat() if command.has_existing else None
                ),
                "existing_kind": command.existing.kind.value if command.has_existing else None,
                "edit_ref": command.existing.edit_ref if command.has_existing else None,
            }
            for command in commands
        ]
        csv_path = output_dir / generate_filename("sync_commands", "csv")
        save_csv(pd.DataFrame(rows), csv_path)
        print(f"Commands saved to: {csv_path}")

    return json_path


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = parse_arguments(argv)

    output_dir = args.output_dir or config.output_dir
    config.create_output_directories(output_dir)

    logger = setup_logger(
        "registry_sync",
        level=getattr(logging, args.log_level or config.log_level, logging.INFO),
        log_file=str(output_dir / "logs" / LOG_FILENAME)
    )

    try:
        logger.info("Validating configuration")
        config.validate()

        extra_lesson_action = ExtraLessonAction(
            args.extra_lessons or config.extra_lesson_action
        )
        base_url = args.base_url or config.registry_base_url

        if args.start and args.end and args.start > args.end:
            print(f"ERROR: --start {args.start} is after --end {args.end}")
            return 1

        # Step 1: Schedule inputs
        print("\n[1/5] Loading schedule...")
        lessons_result = load_regular_lessons(args.lessons)
        if lessons_result.is_failure:
            logger.error(lessons_result.message)
            print(f"ERROR: {lessons_result.message}")
            return 1

        weeks_result = load_study_weeks(args.weeks)
        if weeks_result.is_failure:
            logger.error(weeks_result.message)
            print(f"ERROR: {weeks_result.message}")
            return 1

        lessons = select_lessons(
            lessons_result.value,
            course=args.course,
            group=args.group,
            sub_group=args.sub_group
        )
        print(f"✓ {len(lessons)} lessons selected, {len(weeks_result.value)} study weeks")

        # Step 2: Expansion
        print("\n[2/5] Expanding lessons into dated occurrences...")
        scheduled = expand_scheduled_occurrences(
            lessons,
            StudyWeekDateProvider(weeks_result.value),
            LessonTimeConfig.with_duration_minutes(config.lesson_duration),
            start=args.start,
            end=args.end
        )
        print(f"✓ {len(scheduled)} scheduled occurrences")

        # Step 3: Registry state
        print("\n[3/5] Loading registry records...")
        existing_result = load_existing_occurrences(args.existing, base_url=base_url)
        if existing_result.is_failure:
            logger.error(existing_result.message)
            print(f"ERROR: {existing_result.message}")
            return 1

        existing = filter_window(existing_result.value, args.start, args.end)
        print(f"✓ {len(existing)} registry records in window")

        # Step 4: Reconciliation
        print("\n[4/5] Reconciling...")
        commands = reconcile(scheduled, existing)
        display_summary(commands, len(scheduled), len(existing))

        # Step 5: Dry run
        print("\n[5/5] DRY RUN - Applying commands to a recording gateway")
        applier = CommandApplier(
            DryRunRegistryGateway(),
            extra_lesson_action=extra_lesson_action,
            max_retries=config.apply_max_retries,
            circuit_breaker=CircuitBreaker(
                failure_threshold=config.circuit_breaker_threshold,
                expected_exception=RegistryRequestError
            )
        )
        report = applier.apply(commands)
        print(
            f"✓ {report.created} created, {report.updated} updated, "
            f"{report.deleted} deleted, {report.skipped} left alone"
        )
        if report.failed:
            print(f"✗ {report.failed} failed")

        save_execution_report(
            output_dir / "reports", args, commands, report, extra_lesson_action
        )

        print("\n" + "=" * 60)
        print("EXECUTION COMPLETE")
        print("=" * 60)

        return 0 if report.is_success else 1

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"\nERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
