"""
Report store gateway for Rescue365
Thin typed access to the rescue_reports table.

Every call performs exactly one remote read or write. Nothing is cached
and nothing is retried; failures surface as StoreError.
"""

import logging
from typing import Optional, List, Dict, Any

import httpx
from sqlalchemy.exc import SQLAlchemyError

from rescue365.core.config import Settings, settings as default_settings
from rescue365.core.exceptions import StoreError, ConfigurationError
from rescue365.database.connection import DatabaseConnection
from rescue365.database.models import RescueReportRecord
from rescue365.reports.models import RescueReport, ReportInput, status_value

logger = logging.getLogger(__name__)


class SupabaseReportStore:
    """
    Report store backed by a Supabase (PostgREST) table.

    Usage:
        store = SupabaseReportStore(url="https://xyz.supabase.co", api_key="...")
        report_id = store.create(report_input)
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "rescue_reports",
        access_token: Optional[str] = None,
        timeout: float = 30.0
    ):
        """
        Initialize Supabase report store.

        Args:
            url: Supabase project URL
            api_key: Project anon or service key
            table: Report table name
            access_token: Signed-in user's JWT, sent instead of the key
            timeout: HTTP request timeout in seconds
        """
        if not url or not api_key:
            raise ConfigurationError("Supabase URL and key are required")

        self.url = url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.access_token = access_token
        self.timeout = timeout

    @property
    def table_url(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def with_token(self, access_token: Optional[str]) -> "SupabaseReportStore":
        """Return a store that acts on behalf of a signed-in user."""
        return SupabaseReportStore(
            url=self.url,
            api_key=self.api_key,
            table=self.table,
            access_token=access_token,
            timeout=self.timeout
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """Send one request to the table endpoint and decode the JSON body."""
        request_headers = self._headers()
        if headers:
            request_headers.update(headers)

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(
                    method,
                    self.table_url,
                    params=params,
                    json=json,
                    headers=request_headers
                )
        except httpx.HTTPError as e:
            logger.error(f"Report store request failed: {e}")
            raise StoreError(str(e)) from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(f"Report store returned {response.status_code}: {message}")
            raise StoreError(message, status_code=response.status_code)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Invalid response from report store: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or str(body)
        return str(body)

    def create(self, report: ReportInput) -> str:
        """
        Insert a new report.

        Args:
            report: Validated report fields

        Returns:
            Id assigned by the store
        """
        rows = self._request(
            "POST",
            json=[report.to_row()],
            headers={"Prefer": "return=representation"}
        )

        if not rows or "id" not in rows[0]:
            raise StoreError("Report store did not return the created report")

        report_id = str(rows[0]["id"])
        logger.info(f"Rescue report created: {report_id}")
        return report_id

    def update_status(self, report_id: str, status: str) -> None:
        """Set the status of one report."""
        self._request(
            "PATCH",
            params={"id": f"eq.{report_id}"},
            json={"status": status_value(status)}
        )
        logger.info(f"Rescue report {report_id} status set to {status_value(status)!r}")

    def list_all(self) -> List[RescueReport]:
        """Fetch every report in store order."""
        rows = self._request("GET", params={"select": "*"}) or []
        return _rows_to_reports(rows)


class SQLReportStore:
    """
    Report store backed by a SQL database through SQLAlchemy.
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or DatabaseConnection()

    def create(self, report: ReportInput) -> str:
        """Insert a new report and return its id."""
        try:
            with self.db.get_session() as session:
                record = RescueReportRecord(**report.to_row())
                session.add(record)
                session.flush()
                report_id = str(record.id)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

        logger.info(f"Rescue report created: {report_id}")
        return report_id

    def update_status(self, report_id: str, status: str) -> None:
        """Set the status of one report."""
        try:
            with self.db.get_session() as session:
                record = session.get(RescueReportRecord, int(report_id))
                if record is None:
                    raise StoreError(f"Rescue report {report_id} not found", status_code=404)
                record.status = status_value(status)
        except ValueError as e:
            raise StoreError(f"Invalid report id: {report_id}") from e
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

        logger.info(f"Rescue report {report_id} status set to {status_value(status)!r}")

    def list_all(self) -> List[RescueReport]:
        """Fetch every report in insertion order."""
        try:
            with self.db.get_session() as session:
                records = (
                    session.query(RescueReportRecord)
                    .order_by(RescueReportRecord.id)
                    .all()
                )
                rows = [r.to_dict() for r in records]
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

        return _rows_to_reports(rows)


class MockReportStore:
    """In-memory report store for testing."""

    def __init__(self, reports: Optional[List[RescueReport]] = None):
        self._reports: Dict[str, RescueReport] = {r.id: r for r in (reports or [])}
        self._next_id = len(self._reports) + 1
        self.calls: List[str] = []
        self.fail_with: Optional[str] = None

    def _check_failure(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with:
            raise StoreError(self.fail_with)

    def create(self, report: ReportInput) -> str:
        self._check_failure("create")
        report_id = str(self._next_id)
        self._next_id += 1
        row = report.to_row()
        row["id"] = report_id
        self._reports[report_id] = RescueReport.from_row(row)
        return report_id

    def update_status(self, report_id: str, status: str) -> None:
        self._check_failure("update_status")
        report = self._reports.get(str(report_id))
        if report is None:
            raise StoreError(f"Rescue report {report_id} not found", status_code=404)
        self._reports[report.id] = report.with_status(status_value(status))

    def list_all(self) -> List[RescueReport]:
        self._check_failure("list_all")
        return list(self._reports.values())


def _rows_to_reports(rows: List[Dict[str, Any]]) -> List[RescueReport]:
    """Convert table rows, skipping rows without a usable location."""
    reports = []
    for row in rows:
        try:
            reports.append(RescueReport.from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Failed to parse report row {row.get('id')}: {e}")
            continue
    return reports


def get_report_store(config: Optional[Settings] = None):
    """
    Get the report store for the current configuration.

    Uses the hosted Supabase table when credentials are configured,
    otherwise the SQL database at DATABASE_URL.
    """
    config = config or default_settings

    if config.supabase_configured:
        return SupabaseReportStore(
            url=config.supabase_url,
            api_key=config.supabase_key,
            table=config.reports_table,
            timeout=config.store_timeout_seconds
        )

    logger.warning("Supabase not configured, using SQL report store")
    db = DatabaseConnection(database_url=config.database_url)
    db.create_tables()
    return SQLReportStore(db)
