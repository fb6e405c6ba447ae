from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import AttendanceReconciler
from .attendance.repository import AttendanceRepository
from .attendance.scan_router import ScanRouter
from .attendance.service import AttendanceService
from .closeout.service import EndOfDayCloseout
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_NOTIFY_WORKERS, PAIRING_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection, TransactionManager
from .engine import AttendanceEngine
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import BackgroundNotifier, Notifier, StoredNotifier
from .pairing.manager import PairingSessionManager
from .pairing.mysql_card_repository import MySQLCardBindingRepository
from .pairing.repository import CardBindingRepository
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import ApprovalWorkflow
from .schedules.mysql_schedule_repository import MySQLScheduleConfigRepository
from .schedules.repository import ScheduleConfigRepository
from .schedules.service import ScheduleConfigProvider
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    transactions: TransactionManager

    users_repo: UserRepository
    cards_repo: CardBindingRepository
    attendance_repo: AttendanceRepository
    settings_repo: ScheduleConfigRepository
    requests_repo: RequestRepository

    notifier: Notifier
    schedule_provider: ScheduleConfigProvider
    reconciler: AttendanceReconciler
    pairing: PairingSessionManager
    attendance_service: AttendanceService
    scan_router: ScanRouter
    approvals: ApprovalWorkflow
    closeout: EndOfDayCloseout
    engine: AttendanceEngine


def assemble(
    *,
    transactions: TransactionManager,
    users_repo: UserRepository,
    cards_repo: CardBindingRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: ScheduleConfigRepository,
    requests_repo: RequestRepository,
    notifier: Notifier,
    clock: Optional[Clock] = None,
    pairing_timeout_seconds: int = PAIRING_TIMEOUT_SECONDS,
    closeout_mark_absent: bool = True,
) -> Container:
    """Wire services on top of the given repositories."""

    clock = clock or SystemClock()

    schedule_provider = ScheduleConfigProvider(settings_repo)
    reconciler = AttendanceReconciler(attendance_repo, transactions, clock=clock)
    pairing = PairingSessionManager(cards_repo, clock=clock, timeout_seconds=pairing_timeout_seconds)
    attendance_service = AttendanceService(
        reconciler,
        users_repo,
        schedule_provider,
        strategy_factory=AttendanceStrategyFactory(),
        clock=clock,
    )
    scan_router = ScanRouter(pairing, cards_repo, attendance_service)
    approvals = ApprovalWorkflow(requests_repo, reconciler, transactions, notifier, users=users_repo, clock=clock)
    closeout = EndOfDayCloseout(
        reconciler,
        attendance_repo,
        users_repo,
        schedule_provider,
        mark_absent=closeout_mark_absent,
        clock=clock,
    )
    engine = AttendanceEngine(pairing, scan_router, attendance_service, approvals, closeout)

    return Container(
        transactions=transactions,
        users_repo=users_repo,
        cards_repo=cards_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        requests_repo=requests_repo,
        notifier=notifier,
        schedule_provider=schedule_provider,
        reconciler=reconciler,
        pairing=pairing,
        attendance_service=attendance_service,
        scan_router=scan_router,
        approvals=approvals,
        closeout=closeout,
        engine=engine,
    )


def build_container(
    *,
    db_config: dict,
    pairing_timeout_seconds: int = PAIRING_TIMEOUT_SECONDS,
    closeout_mark_absent: bool = True,
    notify_workers: int = DEFAULT_NOTIFY_WORKERS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    notifier = BackgroundNotifier(StoredNotifier(MySQLNotificationRepository(conn)), workers=notify_workers)

    return assemble(
        transactions=conn,
        users_repo=MySQLUserRepository(conn),
        cards_repo=MySQLCardBindingRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLScheduleConfigRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        notifier=notifier,
        pairing_timeout_seconds=pairing_timeout_seconds,
        closeout_mark_absent=closeout_mark_absent,
    )
