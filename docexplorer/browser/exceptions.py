class SessionError(Exception):
    """Raised when the shared browser session crashes or becomes unusable."""
