from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.service import AuditLog
from .common.geo import Coordinates
from .common.scheduler import PeriodicScheduler
from .common.session_state import SessionRegistry
from .core.constants import (
    DEFAULT_MAX_RADIUS_KM,
    DEFAULT_TARGET_LOCATION,
    JUSTIFICATION_POLL_SECONDS,
    TOKEN_DURATION_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .evidence.storage import LocalEvidenceStorage
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .justifications.mysql_justification_repository import MySQLJustificationRepository
from .justifications.service import JustificationWorkflow
from .justifications.watcher import ApprovalWatcher
from .punches.history import HistoryService
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.registrar import PunchRegistrar
from .reports.aggregator import BalanceAggregator
from .reports.mysql_balance_repository import MySQLBalanceSnapshotRepository
from .reports.service import ReportService
from .settings.mysql_config_repository import MySQLConfigRepository
from .settings.service import SettingsService
from .tokens.challenge import ChallengeTokenManager, ChallengeTokenRegistry


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    punches_repo: MySQLPunchRepository
    justifications_repo: MySQLJustificationRepository
    holidays_repo: MySQLHolidayRepository
    config_repo: MySQLConfigRepository
    audit_repo: MySQLAuditRepository

    scheduler: PeriodicScheduler
    sessions: SessionRegistry
    audit_log: AuditLog
    settings_service: SettingsService
    holiday_service: HolidayService
    token_registry: ChallengeTokenRegistry
    justification_workflow: JustificationWorkflow
    approval_watcher: ApprovalWatcher
    punch_registrar: PunchRegistrar
    history_service: HistoryService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    target_location: tuple[float, float] = DEFAULT_TARGET_LOCATION,
    max_radius_km: float = DEFAULT_MAX_RADIUS_KM,
    token_duration_seconds: int = TOKEN_DURATION_SECONDS,
    justification_poll_seconds: float = JUSTIFICATION_POLL_SECONDS,
    evidence_dir: str = "uploads/evidence",
    evidence_base_url: str = "/evidence",
    app_id: int = 1,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    punches_repo = MySQLPunchRepository(conn)
    justifications_repo = MySQLJustificationRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    config_repo = MySQLConfigRepository(conn)
    audit_repo = MySQLAuditRepository(conn)

    scheduler = PeriodicScheduler()
    sessions = SessionRegistry()
    audit_log = AuditLog(audit_repo, sessions, app_id=app_id)

    settings_service = SettingsService(
        config_repo,
        target=Coordinates.parse(*target_location),
        default_radius_km=max_radius_km,
    )
    holiday_service = HolidayService(holidays_repo)
    token_registry = ChallengeTokenRegistry(
        scheduler,
        factory=partial(ChallengeTokenManager, duration_seconds=token_duration_seconds),
    )
    justification_workflow = JustificationWorkflow(
        justifications_repo,
        LocalEvidenceStorage(evidence_dir, base_url=evidence_base_url),
        sessions,
        audit=audit_log,
    )
    approval_watcher = ApprovalWatcher(justification_workflow, scheduler, interval=justification_poll_seconds)
    punch_registrar = PunchRegistrar(
        punches_repo,
        settings_service,
        token_registry,
        justification_workflow,
        audit=audit_log,
    )
    history_service = HistoryService(punches_repo, holidays_repo)
    report_service = ReportService(
        BalanceAggregator(punches_repo),
        holidays_repo,
        snapshots=MySQLBalanceSnapshotRepository(conn),
    )

    # Timers belong to the session that started them.
    sessions.on_close(token_registry.discard)
    sessions.on_close(approval_watcher.unwatch)

    return Container(
        conn=conn,
        punches_repo=punches_repo,
        justifications_repo=justifications_repo,
        holidays_repo=holidays_repo,
        config_repo=config_repo,
        audit_repo=audit_repo,
        scheduler=scheduler,
        sessions=sessions,
        audit_log=audit_log,
        settings_service=settings_service,
        holiday_service=holiday_service,
        token_registry=token_registry,
        justification_workflow=justification_workflow,
        approval_watcher=approval_watcher,
        punch_registrar=punch_registrar,
        history_service=history_service,
        report_service=report_service,
    )
