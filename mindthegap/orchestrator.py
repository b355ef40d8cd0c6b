"""
Main Orchestrator for Mind the Gap

This module ties together all the components and defines the dashboard
flow:
1. Initialise (shared link / cached session / fresh state -> ready)
2. Income (raw text -> parse -> save -> confirmed snapshot)
3. Donations (form -> validate -> add/update/remove -> confirmed list)
4. Share (link -> clipboard, plus a social post link)

DESIGN DECISION: The flow only ever shows confirmed state.
- Nothing is written before validation passes
- State changes only after the adapter confirms the write
- A failed call leaves the last known good state in place and shows
  a transient message; no exception escapes to the UI

Every mutation takes a sequence number. If responses come back out of
order, a response older than the latest applied one is discarded.
"""

from typing import Optional, Union

from mindthegap.calculations.aggregation import aggregate, build_metrics
from mindthegap.calculations.annualization import Frequency
from mindthegap.calculations.numeric import NumberFormatter, parse_numeric_input
from mindthegap.config import Settings, get_settings
from mindthegap.log import get_logger
from mindthegap.models.dashboard import DashboardView, LoadState
from mindthegap.models.donation import Donation, Snapshot
from mindthegap.notifications import MessageCenter
from mindthegap.services.persistence import (
    GENERIC_ERROR_MESSAGE,
    BackendError,
    ClientEnvironment,
    HouseholdApiClient,
    LocalPersistenceAdapter,
    NothingToShareError,
    PersistenceAdapter,
    PersistenceError,
    RemotePersistenceAdapter,
    TransportError,
    build_social_share_url,
)
from mindthegap.validation import DonationValidator


logger = get_logger(__name__)


INCOME_SAVED = "Income saved."
INCOME_FAILED = "Updating your income fizzled."
DONATION_ADDED = "Donation added."
DONATION_UPDATED = "Donation updated."
DONATION_REMOVED = "Donation removed."
DONATION_ADD_FAILED = "Could not store that donation."
DONATION_UPDATE_FAILED = "Could not update that donation."
DONATION_REMOVE_FAILED = "Could not remove that donation."
SHARE_COPIED = "Shareable link copied to your clipboard."


class DashboardFlow:
    """
    Orchestrates the dashboard.

    Flow:
    1. initialise() -> state goes loading -> ready (always)
    2. submit_income / submit_donation / remove_donation / share
    3. view() -> a consistent DashboardView for rendering

    All derived figures are recomputed in view(); nothing derived is stored.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        formatter: NumberFormatter,
        messages: MessageCenter,
        validator: Optional[DonationValidator] = None,
        include_self: bool = True,
    ):
        self._adapter = adapter
        self._formatter = formatter
        self._messages = messages
        self._validator = validator or DonationValidator()
        self._include_self = include_self

        self._state = LoadState.LOADING
        self._annual_income = 0
        self._income_input = ""
        self._donations: list[Donation] = []
        self._editing_id: Optional[str] = None
        self._share_link: Optional[str] = None
        self._social_share_url: Optional[str] = None

        self._issued = 0
        self._applied = 0

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def adapter(self) -> PersistenceAdapter:
        return self._adapter

    @property
    def messages(self) -> MessageCenter:
        return self._messages

    @property
    def formatter(self) -> NumberFormatter:
        return self._formatter

    # -------------------------------------------------------------------------
    # Sequencing
    # -------------------------------------------------------------------------

    def _next_sequence(self) -> int:
        self._issued += 1
        return self._issued

    def _accept(self, sequence: int, operation: str) -> bool:
        """Whether a response may be applied; records it if so."""
        if sequence < self._applied:
            logger.info(
                "stale_response_discarded",
                operation=operation,
                sequence=sequence,
                applied=self._applied,
            )
            return False
        self._applied = sequence
        return True

    # -------------------------------------------------------------------------
    # State helpers
    # -------------------------------------------------------------------------

    def _apply_snapshot(self, snapshot: Snapshot) -> None:
        self._annual_income = snapshot.annual_income
        self._income_input = (
            self._formatter.format_number(snapshot.annual_income)
            if snapshot.annual_income > 0 else ""
        )
        self._donations = list(snapshot.donations)

    def _report_failure(self, error: PersistenceError, operation_message: str) -> None:
        if isinstance(error, (BackendError, TransportError)):
            self._messages.error(operation_message)
        else:
            self._messages.error(error.user_message)

    def _find(self, donation_id: Optional[str]) -> Optional[Donation]:
        for donation in self._donations:
            if donation.id == donation_id:
                return donation
        return None

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def initialise(self) -> DashboardView:
        """Resolve the initial state. Always ends in READY."""
        self._state = LoadState.LOADING
        sequence = self._next_sequence()
        try:
            snapshot = await self._adapter.load()
            if self._accept(sequence, "load"):
                self._apply_snapshot(snapshot)
        except PersistenceError as e:
            logger.warning("initialise_failed", error=str(e))
            self._apply_snapshot(Snapshot())
            self._messages.error(e.user_message)
        except Exception as e:
            logger.exception("initialise_crashed", error=str(e))
            self._apply_snapshot(Snapshot())
            self._messages.error(GENERIC_ERROR_MESSAGE)
        finally:
            self._state = LoadState.READY
        return self.view()

    async def submit_income(self, text: Optional[str]) -> bool:
        """Parse and store the annual income. Returns True once confirmed."""
        parsed = parse_numeric_input(text)
        self._income_input = self._formatter.format_input(text)

        sequence = self._next_sequence()
        try:
            snapshot = await self._adapter.save_income(parsed)
        except PersistenceError as e:
            logger.warning("income_save_failed", error=str(e))
            self._report_failure(e, INCOME_FAILED)
            return False

        if not self._accept(sequence, "save_income"):
            return False
        self._apply_snapshot(snapshot)
        self._messages.success(INCOME_SAVED)
        return True

    async def submit_donation(
        self,
        charity_name: Optional[str],
        amount: Union[str, int, None],
        frequency: Union[Frequency, str, None],
    ) -> bool:
        """Add a donation, or update the one being edited."""
        editing_id = self._editing_id
        result = self._validator.validate(
            charity_name,
            amount,
            frequency,
            donation_id=editing_id,
            require_id=editing_id is not None,
        )
        if not result.is_valid:
            self._messages.error(self._validator.get_user_friendly_summary(result))
            return False
        fields = self._validator.to_fields(charity_name, amount, frequency)

        sequence = self._next_sequence()
        try:
            if editing_id is None:
                donations = await self._adapter.add_donation(fields)
            else:
                donations = await self._adapter.update_donation(editing_id, fields)
        except PersistenceError as e:
            logger.warning(
                "donation_save_failed",
                donation_id=editing_id,
                error=str(e),
            )
            self._report_failure(
                e,
                DONATION_ADD_FAILED if editing_id is None else DONATION_UPDATE_FAILED,
            )
            return False

        if not self._accept(sequence, "save_donation"):
            return False
        self._donations = list(donations)
        self._editing_id = None
        self._messages.success(DONATION_ADDED if editing_id is None else DONATION_UPDATED)
        return True

    def start_editing(self, donation_id: str) -> bool:
        if self._find(donation_id) is None:
            summary = self._validator.get_user_friendly_summary(
                self._validator.validate_identifier(None)
            )
            self._messages.error(summary)
            return False
        self._editing_id = donation_id
        return True

    def cancel_editing(self) -> None:
        self._editing_id = None

    def edit_form(self) -> Optional[dict]:
        """Prefilled form values for the donation being edited."""
        donation = self._find(self._editing_id)
        if donation is None:
            return None
        return {
            "charity_name": donation.charity_name,
            "amount": self._formatter.format_number(donation.amount),
            "frequency": donation.frequency,
        }

    async def remove_donation(self, donation_id: Optional[str]) -> bool:
        result = self._validator.validate_identifier(donation_id)
        if not result.is_valid:
            self._messages.error(self._validator.get_user_friendly_summary(result))
            return False

        sequence = self._next_sequence()
        try:
            donations = await self._adapter.remove_donation(donation_id)
        except PersistenceError as e:
            logger.warning("donation_remove_failed", donation_id=donation_id, error=str(e))
            self._report_failure(e, DONATION_REMOVE_FAILED)
            return False

        if not self._accept(sequence, "remove_donation"):
            return False
        self._donations = list(donations)
        if self._editing_id == donation_id:
            self._editing_id = None
        self._messages.success(DONATION_REMOVED)
        return True

    async def share(self) -> Optional[str]:
        """Build a share link (copied to the clipboard when possible)."""
        try:
            link = await self._adapter.share()
        except NothingToShareError as e:
            self._messages.info(e.user_message)
            return None
        except PersistenceError as e:
            logger.warning("share_failed", error=str(e))
            self._messages.error(e.user_message)
            return None

        percentage = aggregate(self._annual_income, self._donations).percentage
        self._share_link = link
        self._social_share_url = build_social_share_url(link, percentage, self._formatter)
        self._messages.success(SHARE_COPIED)
        return link

    def view(self) -> DashboardView:
        aggregation = aggregate(
            self._annual_income,
            self._donations,
            include_self=self._include_self,
        )
        return DashboardView(
            state=self._state,
            household_id=self._adapter.household_id,
            annual_income=self._annual_income,
            income_input=self._income_input,
            donations=list(self._donations),
            aggregation=aggregation,
            metrics=build_metrics(aggregation, self._formatter),
            message=self._messages.current,
            share_link=self._share_link,
            social_share_url=self._social_share_url,
            editing_id=self._editing_id,
        )

    def close(self) -> None:
        """Cancel pending timers."""
        self._messages.close()


def create_app_components(
    environment: ClientEnvironment,
    settings: Optional[Settings] = None,
    api_transport=None,
    mode: Optional[str] = None,
) -> DashboardFlow:
    """
    Factory function to create all application components.

    Args:
        environment: Browser-side surfaces (Streamlit or in-memory)
        settings: Root settings; defaults to get_settings()
        api_transport: Optional httpx transport for the API client (tests)
        mode: "remote" or "local"; defaults to the configured mode

    Returns:
        A DashboardFlow wired to the selected persistence strategy
    """
    settings = settings or get_settings()
    app_settings = settings.app
    mode = mode or app_settings.persistence_mode

    formatter = NumberFormatter(
        grouping_separator=app_settings.grouping_separator,
        currency_symbol=app_settings.currency_symbol,
    )
    messages = MessageCenter(timeout_seconds=app_settings.message_timeout_seconds)

    if mode == "remote":
        client = HouseholdApiClient(settings.api, transport=api_transport)
        adapter: PersistenceAdapter = RemotePersistenceAdapter(client, environment, app_settings)
    elif mode == "local":
        adapter = LocalPersistenceAdapter(environment, app_settings)
    else:
        raise ValueError(f"Unknown persistence mode: {mode!r}")

    logger.info("components_created", persistence_mode=mode)
    return DashboardFlow(
        adapter=adapter,
        formatter=formatter,
        messages=messages,
        include_self=app_settings.show_self_in_comparison,
    )
