from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from .attendance.auto_select import AutoCheckinCoordinator, TimerFactory
from .attendance.eligibility import EligibilityStateMachine
from .attendance.factory import RecordingStrategyFactory
from .attendance.notifier import LoggingCelebrationNotifier
from .attendance.service import AttendanceRecorder
from .attendees.mysql_attendee_repository import MySQLAttendeeRepository
from .attendees.repository import AttendeeRepository
from .attendees.service import AttendeeService
from .certificates.service import CertificateService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_AUTO_CHECKIN_DELAY_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .feedback.mysql_feedback_repository import MySQLFeedbackRepository
from .feedback.repository import FeedbackRepository
from .feedback.service import FeedbackService
from .reports.service import ReportService
from .schedules.evaluator import TimeWindowEvaluator
from .schedules.model import SessionWindow
from .schedules.registry import DEFAULT_WINDOWS, ScheduleRegistry
from .users.mysql_admin_repository import MySQLAdminRepository
from .users.repository import AdminRepository
from .users.service import AuthService
from .zones.mysql_zone_repository import MySQLZoneRepository
from .zones.repository import ZoneRepository
from .zones.service import ZoneService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendees_repo: AttendeeRepository
    feedback_repo: FeedbackRepository
    zones_repo: ZoneRepository
    admins_repo: AdminRepository

    registry: ScheduleRegistry
    evaluator: TimeWindowEvaluator
    eligibility: EligibilityStateMachine

    auth_service: AuthService
    zone_service: ZoneService
    attendee_service: AttendeeService
    recorder: AttendanceRecorder
    auto_checkin: AutoCheckinCoordinator
    feedback_service: FeedbackService
    report_service: ReportService
    certificate_service: CertificateService


def assemble_container(
    *,
    attendees_repo: AttendeeRepository,
    feedback_repo: FeedbackRepository,
    zones_repo: ZoneRepository,
    admins_repo: AdminRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Optional[Clock] = None,
    windows: Iterable[SessionWindow] = DEFAULT_WINDOWS,
    auto_checkin_delay: float = DEFAULT_AUTO_CHECKIN_DELAY_SECONDS,
    timer_factory: TimerFactory = threading.Timer,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, in-memory in tests)."""

    clock = clock or SystemClock()

    registry = ScheduleRegistry(windows)
    evaluator = TimeWindowEvaluator(clock)
    eligibility = EligibilityStateMachine(registry, evaluator)

    zone_service = ZoneService(zones_repo)
    attendee_service = AttendeeService(attendees_repo, zone_service, clock=clock)
    recorder = AttendanceRecorder(
        attendees_repo,
        eligibility,
        strategy_factory=RecordingStrategyFactory(),
        notifier=LoggingCelebrationNotifier(),
    )
    auto_checkin = AutoCheckinCoordinator(recorder, delay_seconds=auto_checkin_delay, timer_factory=timer_factory)
    attendee_service.add_listener(auto_checkin.cancel)
    feedback_service = FeedbackService(feedback_repo, attendee_service, clock=clock)

    return Container(
        conn=conn,
        attendees_repo=attendees_repo,
        feedback_repo=feedback_repo,
        zones_repo=zones_repo,
        admins_repo=admins_repo,
        registry=registry,
        evaluator=evaluator,
        eligibility=eligibility,
        auth_service=AuthService(admins_repo),
        zone_service=zone_service,
        attendee_service=attendee_service,
        recorder=recorder,
        auto_checkin=auto_checkin,
        feedback_service=feedback_service,
        report_service=ReportService(attendee_service, registry, zone_service, feedback_service),
        certificate_service=CertificateService(attendee_service, registry),
    )


def build_container(
    *,
    db_config: dict,
    clock: Optional[Clock] = None,
    auto_checkin_delay: float = DEFAULT_AUTO_CHECKIN_DELAY_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        conn=conn,
        attendees_repo=MySQLAttendeeRepository(conn),
        feedback_repo=MySQLFeedbackRepository(conn),
        zones_repo=MySQLZoneRepository(conn),
        admins_repo=MySQLAdminRepository(conn),
        clock=clock,
        auto_checkin_delay=auto_checkin_delay,
    )
