"""Dependency container wiring for the application."""

from dataclasses import dataclass

from club_attendance.adapters.json_file_store import JsonFileLedgerStore
from club_attendance.config import Settings
from club_attendance.services.ledger import LedgerService, LedgerStore
from club_attendance.services.reports import ReportService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: LedgerStore
    ledger_service: LedgerService
    report_service: ReportService


def build_container(
    settings: Settings | None = None, store: LedgerStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_store = store or JsonFileLedgerStore(
        path=resolved_settings.ledger_path,
        storage_key=resolved_settings.ledger_storage_key,
    )
    ledger_service = LedgerService(resolved_store)
    report_service = ReportService(ledger_service)
    return AppContainer(
        settings=resolved_settings,
        store=resolved_store,
        ledger_service=ledger_service,
        report_service=report_service,
    )
