from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..attendees.model import Attendee, AttendeeListFilter, DayAttendance
from ..attendees.service import AttendeeService, apply_filter
from ..core.enums import SessionKey
from ..feedback.service import FeedbackService
from ..schedules.registry import ScheduleRegistry
from ..zones.service import ZoneService

REPORT_FIELDS = ["id", "name", "mobile", "designation", "zone", "day1", "day2", "registered_at"]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class ReportService:
    """Read-side views: attendance report, schedule report and dashboard numbers."""

    def __init__(
        self,
        attendees: AttendeeService,
        registry: ScheduleRegistry,
        zones: ZoneService,
        feedback: FeedbackService,
    ):
        self._attendees = attendees
        self._registry = registry
        self._zones = zones
        self._feedback = feedback

    def day_text(self, day: int, record: DayAttendance) -> str:
        if not record.attended:
            return "Absent"
        text = self._registry.display(day, record.session.value if record.session else "")
        if record.manual_entry:
            text += " (M)"
        if record.late_minutes > 0:
            text += f" L:{record.late_minutes}m"
        return text

    def build_attendance_report(self, *, attendance: str = "all", zone: str = "") -> ReportData:
        rows_in = apply_filter(self._attendees.list_all(), AttendeeListFilter(zone=zone, attendance=attendance))

        out_rows: list[dict] = []
        for a in rows_in:
            out_rows.append(
                {
                    "id": a.attendee_id,
                    "name": a.name,
                    "mobile": a.mobile,
                    "designation": a.designation or "-",
                    "zone": a.zone or "-",
                    "day1": self.day_text(1, a.day1),
                    "day2": self.day_text(2, a.day2),
                    "registered_at": a.registered_at.strftime("%Y-%m-%d %H:%M") if a.registered_at else "",
                }
            )

        summary = [
            {"label": "Total Registered", "count": len(rows_in)},
            {"label": "Day 1 Attendance", "count": sum(1 for a in rows_in if a.day1.attended)},
            {"label": "Day 2 Attendance", "count": sum(1 for a in rows_in if a.day2.attended)},
            {"label": "Both Days", "count": sum(1 for a in rows_in if a.day1.attended and a.day2.attended)},
            {"label": "Manual Entries", "count": sum(1 for a in rows_in if a.day1.manual_entry or a.day2.manual_entry)},
            {"label": "Late Entries", "count": sum(1 for a in rows_in if a.day1.late_minutes > 0 or a.day2.late_minutes > 0)},
        ]
        return ReportData(rows=out_rows, summary=summary)

    def build_schedule_report(self) -> dict:
        attendees = self._attendees.list_all()
        days = []
        for day in self._registry.days():
            sessions = []
            for s in self._registry.sessions_for_day(day):
                sessions.append(
                    {
                        "session": s.key.value,
                        "display": s.display,
                        "start": s.start.strftime("%H:%M"),
                        "end": s.end.strftime("%H:%M"),
                        "count": sum(1 for a in attendees if a.day(day).attended and a.day(day).session == s.key),
                    }
                )
            event_date = self._registry.event_date(day)
            days.append(
                {
                    "day": day,
                    "date": event_date.strftime("%Y-%m-%d") if event_date else None,
                    "attended": sum(1 for a in attendees if a.day(day).attended),
                    "sessions": sessions,
                }
            )
        return {"days": days, "zones": self.zone_stats(attendees)}

    def zone_stats(self, attendees: List[Attendee]) -> list[dict]:
        labels = list(self._zones.list_zones().labels)
        for a in attendees:
            if a.zone and a.zone not in labels:
                labels.append(a.zone)

        out = []
        for zone in labels:
            in_zone = [a for a in attendees if a.zone == zone]
            out.append(
                {
                    "zone": zone,
                    "registered": len(in_zone),
                    "day1": sum(1 for a in in_zone if a.day1.attended),
                    "day2": sum(1 for a in in_zone if a.day2.attended),
                    "manual_entries": sum(1 for a in in_zone if a.day1.manual_entry or a.day2.manual_entry),
                }
            )
        return out

    def dashboard_stats(self) -> dict:
        attendees = self._attendees.list_all()

        def per_session(day: int) -> dict:
            return {k.value: sum(1 for a in attendees if a.day(day).session == k and a.day(day).attended) for k in SessionKey}

        return {
            "registered": len(attendees),
            "day1_attendance": sum(1 for a in attendees if a.day1.attended),
            "day2_attendance": sum(1 for a in attendees if a.day2.attended),
            "both_days": sum(1 for a in attendees if a.day1.attended and a.day2.attended),
            "day1_sessions": per_session(1),
            "day2_sessions": per_session(2),
            "manual_entries": {
                "day1": sum(1 for a in attendees if a.day1.manual_entry),
                "day2": sum(1 for a in attendees if a.day2.manual_entry),
                "total": sum(1 for a in attendees if a.day1.manual_entry or a.day2.manual_entry),
            },
            "late_entries": {
                "day1": sum(1 for a in attendees if a.day1.late_minutes > 0),
                "day2": sum(1 for a in attendees if a.day2.late_minutes > 0),
                "total": sum(1 for a in attendees if a.day1.late_minutes > 0 or a.day2.late_minutes > 0),
            },
            "zones": self.zone_stats(attendees),
            "feedback": self._feedback.stats().to_dict(),
        }
