from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence, Union

import structlog

from ..common.datetime_utils import (
    add_local_days,
    as_hours,
    ensure_utc,
    local_day_key,
    local_midnight,
    minutes_between,
    parse_iso_datetime,
    start_of_week_sunday,
    utc_to_local,
    utcnow,
)
from ..common.validators import parse_decision, require_mutually_exclusive
from ..core.constants import (
    CANDIDATE_LOOKAHEAD_HOURS,
    CANDIDATE_LOOKBACK_HOURS,
    CANDIDATE_SHIFT_LIMIT,
    MANUAL_FORCE_NOTE,
    MANUAL_UNASSIGNED_NOTE,
    MAX_ENTRIES_PER_SHIFT,
)
from ..core.enums import NotificationType, OvertimeDecision, TimeEntryStatus
from ..core.exceptions import (
    CapacityExceededError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    WindowViolationError,
)
from ..hours.calculator.base import WorkedMinutesCalculator
from ..hours.calculator.standard_calculator import StandardWorkedMinutesCalculator
from ..notifications.service import NotificationService
from ..organizations.model import OrganizationPolicy
from ..organizations.repository import OrganizationRepository
from ..schedules.repository import ScheduleWeekRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..users.repository import UserRepository
from .factory import ClockStrategyFactory
from .model import (
    ClockOutResult,
    ClockStatus,
    EmployeeHoursRow,
    HoursComparison,
    NewTimeEntry,
    TimeEntry,
    WeeklyHours,
)
from .repository import TimeEntryRepository
from .window import find_best_eligible_shift, get_clock_eligible_window

log = structlog.get_logger(__name__)

TIME_ENTRY = "TIME_ENTRY"


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


class TimeClockService:
    """Clock-in/clock-out state machine and weekly reconciliation.

    States per employee: no active entry -> CLOCKED_IN -> CLOCKED_OUT or
    PENDING_OVERTIME_APPROVAL; a pending entry resolves to CLOCKED_OUT on
    manager review.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        shifts: ShiftRepository,
        organizations: OrganizationRepository,
        weeks: ScheduleWeekRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        strategy_factory: Optional[ClockStrategyFactory] = None,
        calculator: Optional[WorkedMinutesCalculator] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._entries = entries
        self._shifts = shifts
        self._organizations = organizations
        self._weeks = weeks
        self._users = users
        self._notifications = notifications
        self._factory = strategy_factory or ClockStrategyFactory()
        self._calculator = calculator or StandardWorkedMinutesCalculator()
        self._clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_utc(now) if now else ensure_utc(self._clock())

    def _get_policy(self, org_id: str) -> OrganizationPolicy:
        policy = self._organizations.get_policy(org_id)
        if not policy:
            raise NotFoundError("Organization not found")
        return policy

    def _candidate_shifts(self, org_id: str, employee_id: str, now: datetime) -> Sequence[Shift]:
        return self._shifts.list_overlapping_for_employee(
            org_id=org_id,
            employee_id=employee_id,
            ends_after=now - timedelta(hours=CANDIDATE_LOOKBACK_HOURS),
            starts_before=now + timedelta(hours=CANDIDATE_LOOKAHEAD_HOURS),
            limit=CANDIDATE_SHIFT_LIMIT,
        )

    def _employee_name(self, employee_id: str) -> str:
        try:
            employee = self._users.get_by_id(employee_id)
        except Exception:
            log.warning("employee_lookup_failed", employee_id=employee_id, exc_info=True)
            return "An employee"
        return employee.full_name if employee else "An employee"

    def get_clock_status(self, org_id: str, employee_id: str, *, now: Optional[datetime] = None) -> ClockStatus:
        now = self._now(now)
        policy = self._get_policy(org_id)
        active = self._entries.get_open_for_employee(org_id=org_id, employee_id=employee_id)
        best = find_best_eligible_shift(
            self._candidate_shifts(org_id, employee_id, now),
            now,
            policy.early_allowance_minutes,
        )
        return ClockStatus(policy=policy, active_entry=active, eligible_shift=best)

    def _create_manual_entry(self, org_id: str, employee_id: str, now: datetime, note: str) -> TimeEntry:
        entry = self._entries.create(
            NewTimeEntry(
                org_id=org_id,
                employee_id=employee_id,
                shift_id=None,
                clock_in_at=now,
                scheduled_start=None,
                scheduled_end=None,
                is_late=False,
                late_by_minutes=0,
                notes=note,
            )
        )
        log.info("clock_in", org_id=org_id, employee_id=employee_id, entry_id=entry.entry_id, manual=True)
        return entry

    def clock_in(
        self,
        org_id: str,
        employee_id: str,
        shift_id: Optional[str] = None,
        force: bool = False,
        *,
        now: Optional[datetime] = None,
    ) -> TimeEntry:
        now = self._now(now)
        policy = self._get_policy(org_id)

        if self._entries.get_open_for_employee(org_id=org_id, employee_id=employee_id):
            raise InvalidStateError("You are already clocked in")

        if force and not shift_id:
            return self._create_manual_entry(org_id, employee_id, now, MANUAL_FORCE_NOTE)

        allowance = policy.early_allowance_minutes
        if shift_id:
            shift = self._shifts.get_for_employee(org_id=org_id, shift_id=shift_id, employee_id=employee_id)
            if not shift:
                raise NotFoundError("Assigned shift not found for clock in")
        else:
            best = find_best_eligible_shift(self._candidate_shifts(org_id, employee_id, now), now, allowance)
            shift = best.shift if best else None

        # No scheduled shift: fall back to an unassigned manual entry.
        if not shift:
            return self._create_manual_entry(org_id, employee_id, now, MANUAL_UNASSIGNED_NOTE)

        window = get_clock_eligible_window(shift, allowance)
        if now < window.earliest_clock_in:
            opens_at = utc_to_local(window.earliest_clock_in, policy.timezone).strftime("%I:%M %p").lstrip("0")
            raise WindowViolationError(f"Too early to clock in. Earliest allowed clock-in is {opens_at}")
        if now > window.latest_clock_in:
            raise WindowViolationError("This shift is no longer eligible for clock in")

        existing = self._entries.list_for_shift(org_id=org_id, employee_id=employee_id, shift_id=shift.shift_id)
        if len(existing) >= MAX_ENTRIES_PER_SHIFT:
            raise CapacityExceededError(
                f"Maximum of {MAX_ENTRIES_PER_SHIFT} clock-in/out records allowed for this shift"
            )

        strategy = self._factory.for_clock_in(now=now, shift=shift, is_first_entry=not existing)
        decision = strategy.decide_clock_in(now=now, shift=shift)

        entry = self._entries.create(
            NewTimeEntry(
                org_id=org_id,
                employee_id=employee_id,
                shift_id=shift.shift_id,
                clock_in_at=now,
                scheduled_start=shift.start_time,
                scheduled_end=shift.end_time,
                is_late=decision.is_late,
                late_by_minutes=decision.late_by_minutes,
                status=decision.status,
            )
        )
        log.info(
            "clock_in",
            org_id=org_id,
            employee_id=employee_id,
            entry_id=entry.entry_id,
            shift_id=shift.shift_id,
            late_by_minutes=entry.late_by_minutes,
        )

        if entry.is_late:
            minutes = entry.late_by_minutes
            self._notifications.notify_managers(
                org_id,
                f"Late clock-in ({minutes}m)",
                f"{self._employee_name(employee_id)} clocked in {minutes} minute(s) late.",
                NotificationType.WARNING,
                entry.entry_id,
                TIME_ENTRY,
            )

        return entry

    def _resolve_open_entry(
        self,
        org_id: str,
        employee_id: str,
        time_entry_id: Optional[str],
        shift_id: Optional[str],
    ) -> Optional[TimeEntry]:
        if time_entry_id:
            return self._entries.get_open_by_id(org_id=org_id, employee_id=employee_id, entry_id=time_entry_id)
        if shift_id:
            return self._entries.get_open_for_shift(org_id=org_id, employee_id=employee_id, shift_id=shift_id)
        return self._entries.get_open_for_employee(org_id=org_id, employee_id=employee_id)

    def clock_out(
        self,
        org_id: str,
        employee_id: str,
        *,
        time_entry_id: Optional[str] = None,
        shift_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ClockOutResult:
        require_mutually_exclusive(timeEntryId=time_entry_id, shiftId=shift_id)
        now = self._now(now)

        entry = self._resolve_open_entry(org_id, employee_id, time_entry_id, shift_id)
        if not entry:
            raise InvalidStateError("No active clock-in entry found")
        if now <= entry.clock_in_at:
            raise ValidationError("Clock-out time must be after clock-in time")

        strategy = self._factory.for_clock_out(now=now, entry=entry)
        decision = strategy.decide_clock_out(now=now, entry=entry)
        updated = self._entries.close(entry_id=entry.entry_id, clock_out_at=now, status=decision.status)

        worked = minutes_between(entry.clock_in_at, now)
        log.info(
            "clock_out",
            org_id=org_id,
            employee_id=employee_id,
            entry_id=entry.entry_id,
            status=decision.status.value,
            worked_minutes=worked,
        )

        if decision.needs_overtime_approval:
            self._notifications.notify_managers(
                org_id,
                "Overtime Approval Needed",
                f"{self._employee_name(employee_id)} clocked out after scheduled end and needs approval.",
                NotificationType.OVERTIME_APPROVAL,
                updated.entry_id,
                TIME_ENTRY,
            )

        return ClockOutResult(
            entry=updated,
            worked_minutes=worked,
            worked_hours=as_hours(worked),
            needs_overtime_approval=decision.needs_overtime_approval,
        )

    def get_my_weekly_hours(
        self,
        org_id: str,
        employee_id: str,
        week_start_iso: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> WeeklyHours:
        now = self._now(now)
        tz = self._get_policy(org_id).timezone

        if week_start_iso:
            requested = parse_iso_datetime(week_start_iso)
            week_start = local_midnight(local_day_key(requested, tz), tz)
        else:
            week_start = start_of_week_sunday(now, tz)
        week_end = add_local_days(week_start, 7, tz)

        entries = list(
            self._entries.list_clocked_in_between(org_id=org_id, start=week_start, end=week_end, employee_id=employee_id)
        )
        shifts = self._shifts.list_starting_between(org_id=org_id, employee_id=employee_id, start=week_start, end=week_end)

        actual = sum(self._calculator.worked_minutes(e) for e in entries)
        scheduled = sum(self._calculator.scheduled_minutes(s) for s in shifts)

        return WeeklyHours(
            week_start=week_start,
            week_end=week_end,
            scheduled_hours=as_hours(scheduled),
            actual_hours=as_hours(actual),
            difference_hours=as_hours(actual - scheduled),
            late_clock_ins=sum(1 for e in entries if e.is_late),
            entries=entries,
        )

    def get_org_weekly_hours_comparison(
        self,
        org_id: str,
        week_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> HoursComparison:
        if week_id:
            week = self._weeks.get_by_id(org_id=org_id, week_id=week_id)
        else:
            week = self._weeks.get_containing(org_id=org_id, at=self._now(now))
        if not week:
            raise NotFoundError("Schedule week not found")

        shifts = self._shifts.list_for_week(week_id=week.week_id)
        entries = self._entries.list_clocked_in_between(org_id=org_id, start=week.start_date, end=week.end_date)

        employee_ids = {s.employee_id for s in shifts if s.employee_id} | {e.employee_id for e in entries}
        profiles = {u.user_id: u for u in self._users.list_by_ids(sorted(employee_ids))}

        scheduled: dict[str, int] = {}
        for shift in shifts:
            if not shift.employee_id or shift.employee_id not in profiles:
                continue
            scheduled[shift.employee_id] = scheduled.get(shift.employee_id, 0) + self._calculator.scheduled_minutes(shift)

        actual: dict[str, int] = {}
        late: dict[str, int] = {}
        for entry in entries:
            if entry.employee_id not in profiles:
                continue
            actual[entry.employee_id] = actual.get(entry.employee_id, 0) + self._calculator.worked_minutes(entry)
            late[entry.employee_id] = late.get(entry.employee_id, 0) + (1 if entry.is_late else 0)

        rows = []
        for employee_id in set(scheduled) | set(actual):
            profile = profiles[employee_id]
            scheduled_minutes = scheduled.get(employee_id, 0)
            actual_minutes = actual.get(employee_id, 0)
            rows.append(
                EmployeeHoursRow(
                    employee_id=employee_id,
                    employee_name=profile.full_name,
                    email=profile.email or "",
                    scheduled_hours=as_hours(scheduled_minutes),
                    actual_hours=as_hours(actual_minutes),
                    difference_hours=as_hours(actual_minutes - scheduled_minutes),
                    completion_rate_pct=(
                        round_half_up(actual_minutes / scheduled_minutes * 100) if scheduled_minutes > 0 else 0
                    ),
                    late_clock_ins=late.get(employee_id, 0),
                )
            )

        rows.sort(key=lambda r: (-r.actual_hours, r.employee_name))

        total_scheduled = sum(round_half_up(r.scheduled_hours * 60) for r in rows)
        total_actual = sum(round_half_up(r.actual_hours * 60) for r in rows)

        return HoursComparison(
            week_id=week.week_id,
            week_start=week.start_date,
            week_end=week.end_date,
            employees=rows,
            total_scheduled_hours=as_hours(total_scheduled),
            total_actual_hours=as_hours(total_actual),
        )

    def list_pending_overtime_requests(self, org_id: str) -> Sequence[TimeEntry]:
        return self._entries.list_pending_overtime(org_id=org_id)

    def review_overtime_request(
        self,
        org_id: str,
        entry_id: str,
        decision: Union[OvertimeDecision, str],
        *,
        reviewer_id: Optional[str] = None,
    ) -> TimeEntry:
        if not isinstance(decision, OvertimeDecision):
            decision = parse_decision(decision)

        entry = self._entries.get_pending_overtime(org_id=org_id, entry_id=entry_id)
        if (
            not entry
            or entry.status != TimeEntryStatus.PENDING_OVERTIME_APPROVAL
            or not entry.clock_out_at
            or not entry.scheduled_end
        ):
            raise NotFoundError("Overtime request not found")

        approved = decision == OvertimeDecision.APPROVE
        clock_out = entry.clock_out_at if approved else entry.scheduled_end
        if clock_out <= entry.clock_in_at:
            raise InvalidStateError("Scheduled end is not after clock-in; deny would leave an empty entry")
        updated = self._entries.resolve_overtime(entry_id=entry.entry_id, clock_out_at=clock_out)
        log.info(
            "overtime_reviewed",
            org_id=org_id,
            entry_id=entry.entry_id,
            reviewer_id=reviewer_id,
            decision=decision.value,
        )

        if approved:
            self._notifications.notify(
                org_id,
                entry.employee_id,
                "Overtime Approved",
                "Your late clock-out time was approved.",
                NotificationType.OVERTIME_APPROVED,
                entry.entry_id,
                TIME_ENTRY,
            )
        else:
            self._notifications.notify(
                org_id,
                entry.employee_id,
                "Overtime Denied",
                "Your late clock-out time was denied and adjusted to scheduled end time.",
                NotificationType.OVERTIME_DENIED,
                entry.entry_id,
                TIME_ENTRY,
            )

        return updated
