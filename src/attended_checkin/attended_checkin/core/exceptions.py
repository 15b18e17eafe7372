from __future__ import annotations

from .enums import Severity


class DomainError(Exception):
    """Base exception for business rule violations."""


class CheckInWarning(DomainError):
    """A condition the operator can act on; shown as a warning, never a crash."""

    severity = Severity.WARNING
    default_message = ""

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NoFamilySelectedError(CheckInWarning):
    default_message = "Please pick or add a family."


class NoEligiblePeopleError(CheckInWarning):
    default_message = "No one in this family is eligible to check-in."


class NoPersonSelectedError(CheckInWarning):
    default_message = "Please pick at least one person."


class AdmissionValidationError(CheckInWarning):
    severity = Severity.INFORMATION
    default_message = "Validation: Name, DOB, and Gender are required."


class ActivityFailedError(CheckInWarning):
    """The host workflow activity reported errors; they are listed in the message."""


class CollaboratorError(DomainError):
    """Raised when an external collaborator is unavailable or fails."""


class StoreError(CollaboratorError):
    """Person/group store failure."""


class ReferenceDataError(CollaboratorError):
    """Reference data lookup failure."""


class SessionUnavailableError(CollaboratorError):
    """No check-in state is available for the kiosk session."""
