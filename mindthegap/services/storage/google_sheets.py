"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the hosted backend's system of record:
1. The household can view its numbers directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for a personal dashboard)
- No transactions (each operation touches a single row)
- Limited query capabilities (we filter in Python)

annual_amount is written to its own column for people reading the sheet,
but it is never read back: rows are rebuilt into Donation models, which
recompute it from amount and frequency.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from mindthegap.config import GoogleSheetsSettings, get_settings
from mindthegap.log import get_logger
from mindthegap.models.donation import Donation, DonationFields, Household, utc_now
from mindthegap.services.storage.interface import (
    ConnectionError,
    HouseholdStorageInterface,
    NotFoundError,
    StorageError,
)


logger = get_logger(__name__)


HOUSEHOLD_COLUMNS = [
    "id",
    "alias",
    "annual_income",
    "created_at",
    "updated_at",
]

DONATION_COLUMNS = [
    "id",
    "household_id",
    "charity_name",
    "amount",
    "frequency",
    "annual_amount",
    "created_at",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_households_sheet(self) -> gspread.Worksheet:
        """Get or create the Households worksheet."""
        return self._get_or_create_sheet(
            self._settings.households_sheet_name,
            HOUSEHOLD_COLUMNS,
            rows=1000,
        )

    def get_donations_sheet(self) -> gspread.Worksheet:
        """Get or create the Donations worksheet."""
        return self._get_or_create_sheet(
            self._settings.donations_sheet_name,
            DONATION_COLUMNS,
            rows=5000,
        )


class GoogleSheetsHouseholdStorage(HouseholdStorageInterface):
    """
    Google Sheets implementation of household storage.

    One household per row in the Households sheet, one donation per row in
    the Donations sheet (linked by household_id).
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    # -------------------------------------------------------------------------
    # Row mapping
    # -------------------------------------------------------------------------

    def _household_to_row(self, household: Household) -> list:
        return [
            household.id,
            household.alias or "",
            str(household.annual_income),
            household.created_at.isoformat(),
            household.updated_at.isoformat(),
        ]

    def _row_to_household(self, row: list) -> Household:
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return Household(
            id=safe_get(0),
            alias=safe_get(1) or None,
            annual_income=int(safe_get(2, "0")),
            created_at=datetime.fromisoformat(safe_get(3)),
            updated_at=datetime.fromisoformat(safe_get(4)),
        )

    def _donation_to_row(self, household_id: str, donation: Donation) -> list:
        return [
            donation.id,
            household_id,
            donation.charity_name,
            str(donation.amount),
            donation.frequency.value,
            str(donation.annual_amount),
            donation.created_at.isoformat(),
        ]

    def _row_to_donation(self, row: list) -> Donation:
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return Donation(
            id=safe_get(0),
            charity_name=safe_get(2),
            amount=int(safe_get(3, "0")),
            frequency=safe_get(4),
            created_at=datetime.fromisoformat(safe_get(6)),
        )

    def _find_row(self, rows: list[list], predicate) -> Optional[int]:
        """1-based sheet row index of the first data row matching predicate."""
        for idx, row in enumerate(rows[1:], start=2):  # Row 1 is the header
            if row and predicate(row):
                return idx
        return None

    # -------------------------------------------------------------------------
    # Households
    # -------------------------------------------------------------------------

    # Not retried: a retry after a successful append would add a second row.
    async def create_household(
        self,
        annual_income: int = 0,
        alias: Optional[str] = None,
    ) -> Household:
        household = Household(
            id=str(uuid4()),
            annual_income=annual_income,
            alias=alias,
        )
        try:
            sheet = self._client.get_households_sheet()
            sheet.append_row(self._household_to_row(household), value_input_option="RAW")
        except Exception as e:
            raise StorageError(f"Failed to create household: {e}")
        logger.info("household_created", household_id=household.id)
        return household

    async def get_household(self, household_id: str) -> Optional[Household]:
        try:
            sheet = self._client.get_households_sheet()
            rows = sheet.get_all_values()
        except Exception as e:
            raise StorageError(f"Failed to get household: {e}")

        idx = self._find_row(rows, lambda row: row[0] == household_id)
        if idx is None:
            return None
        return self._row_to_household(rows[idx - 1])

    async def update_household_income(
        self,
        household_id: str,
        annual_income: int,
    ) -> Household:
        try:
            sheet = self._client.get_households_sheet()
            rows = sheet.get_all_values()
            idx = self._find_row(rows, lambda row: row[0] == household_id)
            if idx is None:
                raise NotFoundError(f"Household not found: {household_id}")

            household = self._row_to_household(rows[idx - 1]).model_copy(update={
                "annual_income": annual_income,
                "updated_at": utc_now(),
            })
            new_row = self._household_to_row(household)
            for col_idx, value in enumerate(new_row, start=1):
                sheet.update_cell(idx, col_idx, value)
            return household
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update household: {e}")

    # -------------------------------------------------------------------------
    # Donations
    # -------------------------------------------------------------------------

    async def list_donations(self, household_id: str) -> list[Donation]:
        try:
            sheet = self._client.get_donations_sheet()
            rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to list donations: {e}")

        donations = []
        for row in rows:
            if not row or len(row) < 2 or row[1] != household_id:
                continue
            try:
                donations.append(self._row_to_donation(row))
            except Exception as e:
                logger.warning("malformed_donation_row", donation_id=row[0], error=str(e))
                continue  # Skip malformed rows

        donations.sort(key=lambda d: d.created_at)
        return donations

    async def add_donation(
        self,
        household_id: str,
        fields: DonationFields,
    ) -> Donation:
        if await self.get_household(household_id) is None:
            raise NotFoundError(f"Household not found: {household_id}")

        donation = Donation.create(str(uuid4()), fields)
        try:
            sheet = self._client.get_donations_sheet()
            sheet.append_row(
                self._donation_to_row(household_id, donation),
                value_input_option="RAW",
            )
        except Exception as e:
            raise StorageError(f"Failed to save donation: {e}")
        return donation

    async def update_donation(
        self,
        household_id: str,
        donation_id: str,
        fields: DonationFields,
    ) -> Donation:
        try:
            sheet = self._client.get_donations_sheet()
            rows = sheet.get_all_values()
            idx = self._find_row(
                rows,
                lambda row: row[0] == donation_id and len(row) > 1 and row[1] == household_id,
            )
            if idx is None:
                raise NotFoundError(f"Donation not found: {donation_id}")

            updated = self._row_to_donation(rows[idx - 1]).with_fields(fields)
            new_row = self._donation_to_row(household_id, updated)
            for col_idx, value in enumerate(new_row, start=1):
                sheet.update_cell(idx, col_idx, value)
            return updated
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update donation: {e}")

    async def delete_donation(
        self,
        household_id: str,
        donation_id: str,
    ) -> bool:
        try:
            sheet = self._client.get_donations_sheet()
            rows = sheet.get_all_values()
            idx = self._find_row(
                rows,
                lambda row: row[0] == donation_id and len(row) > 1 and row[1] == household_id,
            )
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete donation: {e}")

    async def check_connection(self) -> bool:
        try:
            self._client.get_spreadsheet()
            return True
        except Exception as e:
            logger.error("sheets_connection_failed", error=str(e))
            return False
