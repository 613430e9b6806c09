"""Command line front end over the SRS core.

Reads already-scraped JSON records and prints computed results as JSON.

Run with:   srs schedule meetings.json
            srs cgpa courses.json --previous-credits 60 --previous-points 210
            srs transcript transcript.json
Stdin:      cat meetings.json | srs schedule -

Input formats:
  schedule    list of {"course": "CS 101-1", "day": "Mon", "start": "H8",
              "duration": 2, "classrooms": ["B-201"]}
  cgpa        list of {"course": "CS 101", "grade": "A", "credits": 3}
  transcript  list of transcript semesters (see src.srs.records.normalize_transcript)

Exit codes:
  0 = success (JSON on stdout)
  1 = unreadable or malformed input (message on stderr)
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.srs.aggregator import CGPACalculator
from src.srs.config import get_config
from src.srs.errors import SRSError
from src.srs.grid import build_weekly_schedule
from src.srs.logging import setup_logging_from_config
from src.srs.models import Totals
from src.srs.records import normalize_transcript


def _read_json(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _require_list(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise SRSError(f"{what} input must be a JSON list")
    return data


def _cmd_schedule(args: argparse.Namespace) -> int:
    entries = _require_list(_read_json(args.file), "schedule")
    result = build_weekly_schedule(entries)
    _print_json(result.model_dump(mode="json"))
    return 0


def _cmd_cgpa(args: argparse.Namespace) -> int:
    entries = _require_list(_read_json(args.file), "cgpa")
    previous = Totals(credits=args.previous_credits, points=args.previous_points)
    result = CGPACalculator.from_config().calculate(entries, previous)
    _print_json(result.model_dump(mode="json", by_alias=True))
    return 0


def _cmd_transcript(args: argparse.Namespace) -> int:
    transcript = normalize_transcript(_require_list(_read_json(args.file), "transcript"))
    results = CGPACalculator.from_config().replay_transcript(transcript)
    _print_json(
        [
            {"semester": semester.semester.label, **result.model_dump(mode="json", by_alias=True)}
            for semester, result in zip(transcript, results)
        ]
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srs",
        description="Weekly schedule grid and CGPA calculation for scraped SRS records.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_schedule = sub.add_parser("schedule", help="Build the weekly schedule grid")
    p_schedule.add_argument("file", help="JSON file with meeting entries ('-' for stdin)")
    p_schedule.set_defaults(handler=_cmd_schedule)

    p_cgpa = sub.add_parser("cgpa", help="Calculate GPA/CGPA for one semester")
    p_cgpa.add_argument("file", help="JSON file with graded courses ('-' for stdin)")
    p_cgpa.add_argument("--previous-credits", type=float, default=0.0, help="Credits before this semester")
    p_cgpa.add_argument("--previous-points", type=float, default=0.0, help="Grade points before this semester")
    p_cgpa.set_defaults(handler=_cmd_cgpa)

    p_transcript = sub.add_parser("transcript", help="Recompute GPA/CGPA for every transcript semester")
    p_transcript.add_argument("file", help="JSON file with transcript semesters ('-' for stdin)")
    p_transcript.set_defaults(handler=_cmd_transcript)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point. Exits via SystemExit with the command's return code."""
    args = build_parser().parse_args(argv)
    setup_logging_from_config(get_config())

    try:
        code = args.handler(args)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Cannot read {args.file}: {exc}", file=sys.stderr)
        code = 1
    except (SRSError, ValidationError) as exc:
        print(f"Invalid input in {args.file}: {exc}", file=sys.stderr)
        code = 1

    raise SystemExit(code)
