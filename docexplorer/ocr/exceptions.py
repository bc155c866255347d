class OcrError(Exception):
    """Raised when pages cannot be rasterized or recognized."""
