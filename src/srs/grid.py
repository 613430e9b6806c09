"""Weekly schedule grid builder.

Merges per-course meeting entries into the fixed 7 x 14 WeeklySchedule.

Rules:
- Entries are placed in input order; a cell collects one detail string per
  entry ("CS101-1 — B-201"), so overlapping sections show up as several
  details in the same cell. Nothing is merged or deduplicated.
- A range running past the last slot (H21) is cut at H21 and reported as a
  Truncation.
- An entry with an unknown day, unknown start slot or a duration below one
  slot is skipped and reported as a SkippedEntry; the rest of the grid is
  still built. The same goes for a raw mapping whose fields do not validate
  (a numeric day, a missing start). An unusable course code is not an
  out-of-range placement and still raises MalformedIdentifier.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from src.srs.errors import InvalidScheduleEntry
from src.srs.identifiers import Course
from src.srs.logging import get_logger
from src.srs.models import (
    DailySchedule,
    Day,
    MeetingEntry,
    ScheduleCell,
    TimeSlot,
    WeeklySchedule,
)

log = get_logger(__name__)

DETAIL_SEPARATOR = " — "
ROOM_SEPARATOR = ", "


class SkippedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int  # position in the input sequence
    entry: Any  # MeetingEntry, or the raw value when it did not validate
    reason: str


class Truncation(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    course: Course
    requested: int  # slots asked for
    placed: int  # slots that fit before the end of the day


class ScheduleBuildResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    schedule: WeeklySchedule
    skipped: tuple[SkippedEntry, ...] = ()
    truncated: tuple[Truncation, ...] = ()

    @property
    def is_clean(self) -> bool:
        """True when every entry was placed in full."""
        return not self.skipped and not self.truncated


def format_detail(entry: MeetingEntry) -> str:
    """Detail string shown in each cell the entry occupies."""
    rooms = ROOM_SEPARATOR.join(room.strip() for room in entry.classrooms if room.strip())
    if not rooms:
        return entry.course.code
    return f"{entry.course.code}{DETAIL_SEPARATOR}{rooms}"


def coerce_entry(raw: Any) -> MeetingEntry:
    """Validate a raw mapping into a MeetingEntry.

    Raises:
        InvalidScheduleEntry: If a field has the wrong type or is missing.
        MalformedIdentifier: If the course code is unusable.
    """
    if isinstance(raw, MeetingEntry):
        return raw
    try:
        return MeetingEntry.model_validate(raw)
    except ValidationError as exc:
        fields = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'entry'}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidScheduleEntry(raw, f"invalid fields ({fields})") from None


def _course_label(entry: Any) -> Any:
    if isinstance(entry, MeetingEntry):
        return entry.course.code
    if isinstance(entry, Mapping):
        return entry.get("course")
    return None


def resolve_placement(entry: MeetingEntry) -> tuple[Day, TimeSlot]:
    """Day and starting slot of an entry.

    Raises:
        InvalidScheduleEntry: If the day or start slot is not part of the grid,
            or the duration is below one slot.
    """
    day = Day.from_label(entry.day)
    if day is None:
        raise InvalidScheduleEntry(entry, f"unknown day {entry.day!r}")
    start = TimeSlot.from_label(entry.start)
    if start is None:
        raise InvalidScheduleEntry(entry, f"unknown time slot {entry.start!r}")
    if entry.duration < 1:
        raise InvalidScheduleEntry(
            entry, f"duration must be at least one slot, got {entry.duration}"
        )
    return day, start


def build_weekly_schedule(
    entries: Iterable[MeetingEntry | Mapping[str, Any]],
) -> ScheduleBuildResult:
    """Place meeting entries on the weekly grid.

    Args:
        entries: MeetingEntry models or raw mappings with the same fields.
            Order matters: it fixes the order of details inside a cell.

    Returns:
        ScheduleBuildResult with the full grid plus skipped and truncated entries.

    Raises:
        MalformedIdentifier: If a raw entry carries an unusable course code.
    """
    slots = list(TimeSlot)
    days = list(Day)
    cells: list[list[list[str] | None]] = [[None] * len(slots) for _ in days]
    skipped: list[SkippedEntry] = []
    truncated: list[Truncation] = []

    count = 0
    for index, raw in enumerate(entries):
        count += 1
        try:
            entry = coerce_entry(raw)
            day, start = resolve_placement(entry)
        except InvalidScheduleEntry as exc:
            log.warning(
                "schedule_entry_skipped",
                index=index,
                course=_course_label(exc.entry),
                reason=exc.reason,
            )
            skipped.append(SkippedEntry(index=index, entry=exc.entry, reason=exc.reason))
            continue

        first = start.position
        stop = first + entry.duration
        last = min(stop, len(slots))
        detail = format_detail(entry)

        row = cells[day.position]
        for position in range(first, last):
            if row[position] is None:
                row[position] = []
            row[position].append(detail)

        if stop > len(slots):
            placed = last - first
            log.warning(
                "schedule_entry_truncated",
                index=index,
                course=entry.course.code,
                day=day.value,
                start=start.name,
                requested=entry.duration,
                placed=placed,
            )
            truncated.append(
                Truncation(
                    index=index,
                    course=entry.course,
                    requested=entry.duration,
                    placed=placed,
                )
            )

    schedule = WeeklySchedule(
        days=tuple(
            DailySchedule(
                day=day,
                slots=tuple(
                    ScheduleCell(
                        time_slot=slot,
                        details=tuple(cells[day.position][slot.position] or ()) or None,
                    )
                    for slot in slots
                ),
            )
            for day in days
        )
    )

    log.debug(
        "schedule_built",
        entries=count,
        skipped=len(skipped),
        truncated=len(truncated),
        conflicts=len(schedule.conflicts()),
    )
    return ScheduleBuildResult(
        schedule=schedule,
        skipped=tuple(skipped),
        truncated=tuple(truncated),
    )
