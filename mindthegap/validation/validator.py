"""
Input Validation

DESIGN DECISION: Validation happens before any network or storage call.
If the charity name is empty, the amount is not positive, the frequency is
unsupported or a required identifier is missing, nothing is sent anywhere
and no state changes. The user gets one inline message instead.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the caller decides what to show.
"""

from typing import Optional, Union

from pydantic import ValidationError

from mindthegap.calculations.annualization import Frequency
from mindthegap.calculations.numeric import parse_numeric_input
from mindthegap.models.donation import DonationFields
from mindthegap.models.validation import ValidationIssue, ValidationResult


DONATION_INPUT_MESSAGE = "Add a charity name and a positive amount."
FREQUENCY_MESSAGE = "Pick how often you give: monthly, quarterly or yearly."
MISSING_ID_MESSAGE = "That donation could not be found. Reload and try again."


class DonationValidator:
    """
    Validates raw donation form input.

    Form input arrives as text ("€ 1.250", " Red Cross "); the validator
    parses the amount with the numeric sanitizer and checks the fields.
    """

    def validate(
        self,
        charity_name: Optional[str],
        amount: Union[str, int, None],
        frequency: Union[Frequency, str, None],
        donation_id: Optional[str] = None,
        require_id: bool = False,
    ) -> ValidationResult:
        """
        Validate donation form input.

        Args:
            charity_name: Raw charity name
            amount: Raw amount text or an already parsed integer
            frequency: Frequency tag
            donation_id: Identifier of the donation being edited
            require_id: Whether donation_id is mandatory (edits)

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        if require_id and not (donation_id or "").strip():
            issues.append(ValidationIssue(
                field="id",
                issue_type="missing",
                message="Donation identifier is required",
            ))

        if not (charity_name or "").strip():
            issues.append(ValidationIssue(
                field="charity_name",
                issue_type="missing",
                message="Charity name is required",
            ))

        parsed_amount = self.parse_amount(amount)
        if parsed_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            ))

        if self.parse_frequency(frequency) is None:
            issues.append(ValidationIssue(
                field="frequency",
                issue_type="unsupported",
                message=f"Unsupported frequency: {frequency!r}",
            ))

        return ValidationResult(is_valid=not issues, issues=issues)

    def validate_identifier(self, donation_id: Optional[str]) -> ValidationResult:
        """Removal only needs an identifier."""
        if (donation_id or "").strip():
            return ValidationResult(is_valid=True)
        return ValidationResult(
            is_valid=False,
            issues=[ValidationIssue(
                field="id",
                issue_type="missing",
                message="Donation identifier is required",
            )],
        )

    def to_fields(
        self,
        charity_name: str,
        amount: Union[str, int],
        frequency: Union[Frequency, str],
    ) -> DonationFields:
        """
        Build DonationFields from input that passed validate().

        Raises:
            ValueError: if the input was not valid after all
        """
        try:
            return DonationFields(
                charity_name=charity_name,
                amount=self.parse_amount(amount),
                frequency=Frequency(frequency),
            )
        except ValidationError as e:
            raise ValueError(str(e)) from e

    @staticmethod
    def parse_amount(amount: Union[str, int, None]) -> int:
        if isinstance(amount, bool):
            return 0
        if isinstance(amount, int):
            return amount
        return parse_numeric_input(amount)

    @staticmethod
    def parse_frequency(frequency: Union[Frequency, str, None]) -> Optional[Frequency]:
        if frequency is None:
            return None
        try:
            return Frequency(frequency)
        except ValueError:
            return None

    def get_user_friendly_summary(self, result: ValidationResult) -> Optional[str]:
        """
        The one message to show for a failed validation, or None.

        Identifier problems win, then frequency, then the generic
        name/amount message the form has always shown.
        """
        if result.is_valid:
            return None
        if result.issues_for("id"):
            return MISSING_ID_MESSAGE
        if result.issues_for("charity_name") or result.issues_for("amount"):
            return DONATION_INPUT_MESSAGE
        if result.issues_for("frequency"):
            return FREQUENCY_MESSAGE
        return DONATION_INPUT_MESSAGE
