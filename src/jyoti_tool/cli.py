"""Command line access to the ANC calculator, schedule and assistant."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from jyoti_tool.assistant import AssistantConfig, AssistantService
from jyoti_tool.excel_writer import (
    ExcelLayout,
    schedule_export_path,
    write_schedule_xlsx,
)
from jyoti_tool.formatting import (
    format_display_date,
    format_duration,
    format_gestational_age,
)
from jyoti_tool.forms import (
    InputError,
    breakdown_days,
    duration_between,
    offset_date,
    parse_iso_date,
    pregnancy_from_edd,
    pregnancy_from_lmp,
    pregnancy_from_weeks,
    schedule_from_birth_date,
)
from jyoti_tool.model import PregnancyResult
from jyoti_tool.storage import SQLiteStore

DEFAULT_DB = "jyoti_tool.sqlite3"

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="ANM helper: EDD/LMP, immunization dates, date tools."
    )
    parser.add_argument(
        "--today",
        default=None,
        help="Reference date YYYY-MM-DD (default: system date).",
    )
    parser.add_argument(
        "--db",
        default=DEFAULT_DB,
        help=f"Settings database (default: ./{DEFAULT_DB}).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logs.")
    sub = parser.add_subparsers(dest="command", required=True)

    edd = sub.add_parser("edd", help="EDD and gestational age from LMP.")
    edd.add_argument("--lmp", required=True)

    lmp = sub.add_parser("lmp", help="LMP from EDD or from weeks+days of gestation.")
    source = lmp.add_mutually_exclusive_group(required=True)
    source.add_argument("--edd")
    source.add_argument("--weeks")
    lmp.add_argument("--days", default="0", help="Extra days (0-6) with --weeks.")

    schedule = sub.add_parser("schedule", help="Vaccination dates from birth date.")
    schedule.add_argument("--birth", required=True)
    schedule.add_argument(
        "--xlsx",
        nargs="?",
        const="",
        default=None,
        help="Also write an Excel file (no value: saved export directory).",
    )

    diff = sub.add_parser("diff", help="Years/months/days between two dates.")
    diff.add_argument("--start", required=True)
    diff.add_argument("--end", required=True)

    offset = sub.add_parser("offset", help="Add or subtract years/months/days.")
    offset.add_argument("--date", required=True)
    offset.add_argument("--years", default="0")
    offset.add_argument("--months", default="0")
    offset.add_argument("--days", default="0")

    days = sub.add_parser("days", help="Total days to approximate Y/M/D.")
    days.add_argument("--total", default="0")

    ask = sub.add_parser("ask", help="Ask the Jyoti assistant.")
    ask.add_argument("prompt")

    config = sub.add_parser("config", help="Show or change saved settings.")
    config.add_argument("--export-dir", default=None)
    config.add_argument("--model", default=None)
    config.add_argument("--speech-language", default=None)
    return parser.parse_args()


def main() -> int:
    """Run the CLI.

    Returns:
        Exit code (0 on success, 2 on rejected input).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        today = parse_iso_date(ns.today) if ns.today else date.today()
        return _dispatch(ns, today)
    except InputError as exc:
        print(f"Error: {exc.message}")
        return 2


def _dispatch(ns: argparse.Namespace, today: date) -> int:
    logger.debug("command=%s today=%s", ns.command, today.isoformat())
    if ns.command == "edd":
        _print_pregnancy(pregnancy_from_lmp(ns.lmp, today))
    elif ns.command == "lmp":
        if ns.edd is not None:
            _print_pregnancy(pregnancy_from_edd(ns.edd, today))
        else:
            _print_pregnancy(pregnancy_from_weeks(ns.weeks, ns.days, today))
    elif ns.command == "schedule":
        events = schedule_from_birth_date(ns.birth, today)
        for event in events:
            print(
                f"{event.age_label:<13} {format_display_date(event.due_date)}  "
                f"{event.primary_label}"
            )
        if ns.xlsx is not None:
            if ns.xlsx:
                out_path = Path(ns.xlsx).expanduser()
            else:
                export_dir = SQLiteStore(Path(ns.db)).load_config().export_dir
                out_path = schedule_export_path(
                    export_dir, events[0].due_date, datetime.now()
                )
            write_schedule_xlsx(events, out_path, ExcelLayout())
            print(f"OK: Output: {out_path}")
    elif ns.command == "diff":
        print(format_duration(duration_between(ns.start, ns.end)))
    elif ns.command == "offset":
        print(format_display_date(offset_date(ns.date, ns.years, ns.months, ns.days)))
    elif ns.command == "days":
        print(format_duration(breakdown_days(ns.total)))
    elif ns.command == "ask":
        settings = SQLiteStore(Path(ns.db)).load_config()
        service = AssistantService(
            AssistantConfig.from_env(
                model=settings.model,
                temperature=settings.temperature,
                timeout_seconds=settings.timeout_seconds,
            )
        )
        print(service.ask(ns.prompt))
    elif ns.command == "config":
        _update_config(ns)
    return 0


def _print_pregnancy(result: PregnancyResult) -> None:
    print(f"LMP: {format_display_date(result.lmp)}")
    print(f"EDD: {format_display_date(result.edd)}")
    print(f"GA:  {format_gestational_age(result.gestational_age)}")


def _update_config(ns: argparse.Namespace) -> None:
    store = SQLiteStore(Path(ns.db))
    settings = store.load_config()
    changes = {
        "export_dir": ns.export_dir,
        "model": ns.model,
        "speech_language": ns.speech_language,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if changes:
        settings = replace(settings, **changes)
        store.save_config(settings)
        logger.info("Saved settings: %s", ", ".join(sorted(changes)))
    print(f"export_dir: {settings.export_dir or '(default)'}")
    print(f"model: {settings.model}")
    print(f"speech_language: {settings.speech_language}")
