from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .core.constants import DEFAULT_TIMEZONE
from .core.enums import StorageBackend
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .database.json_store import JsonDocumentStore
from .reports.service import ReportService
from .timesheets.json_repository import JsonDayRecordRepository
from .timesheets.mysql_repository import MySQLDayRecordRepository
from .timesheets.repository import DayRecordRepository
from .timesheets.service import TimesheetService
from .users.json_repository import JsonUserRepository
from .users.mysql_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    backend: StorageBackend
    timezone: str
    store: Optional[JsonDocumentStore]
    conn: Optional[DatabaseConnection]

    records_repo: DayRecordRepository
    users_repo: UserRepository

    auth_service: AuthService
    timesheet_service: TimesheetService
    report_service: ReportService

    def close(self) -> None:
        """Flush and close the device-local store; MySQL connections are per-operation."""
        if self.store is not None and self.store.is_open:
            self.store.close()


def build_container(settings: dict, *, clock: Optional[Callable[[], datetime]] = None) -> Container:
    try:
        backend = StorageBackend(str(settings.get("STORAGE_BACKEND", StorageBackend.LOCAL.value)).lower())
    except ValueError:
        raise ValidationError(f"Unknown STORAGE_BACKEND: {settings.get('STORAGE_BACKEND')!r}")
    timezone = str(settings.get("TIMEZONE") or DEFAULT_TIMEZONE)

    store = None
    conn = None
    if backend == StorageBackend.LOCAL:
        store = JsonDocumentStore.open(settings["DATA_PATH"])
        records_repo = JsonDayRecordRepository(store)
        users_repo = JsonUserRepository(store)
        logger.info("Using device-local store %s", store.path)
    else:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings["DB_CONFIG"]))
        records_repo = MySQLDayRecordRepository(conn)
        users_repo = MySQLUserRepository(conn)
        logger.info("Using shared MySQL store %s@%s", conn.config.database, conn.config.host)

    timesheet_service = TimesheetService(
        records_repo,
        timezone=timezone,
        clock=clock,
        device_local=backend == StorageBackend.LOCAL,
    )

    return Container(
        backend=backend,
        timezone=timezone,
        store=store,
        conn=conn,
        records_repo=records_repo,
        users_repo=users_repo,
        auth_service=AuthService(users_repo),
        timesheet_service=timesheet_service,
        report_service=ReportService(records_repo),
    )
