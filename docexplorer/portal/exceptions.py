class PortalError(Exception):
    """Base exception for all portal automation errors."""


class InvalidQueryError(PortalError):
    """Raised when a facility search query is too short to be meaningful."""


class InvalidInputError(PortalError):
    """Raised when a required identifier or file is missing or malformed."""


class PortalLayoutError(PortalError):
    """Raised when none of the candidate selectors for a required control match."""
