class ExtractionError(Exception):
    """Raised when neither digital nor optical extraction yields usable text."""
