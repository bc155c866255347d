PDF_MAGIC = b"%PDF"


def is_valid_document(data: bytes | None, min_bytes: int) -> bool:
    """Accept only buffers that start with the PDF header and reach the minimum size."""
    if not data:
        return False
    return data.startswith(PDF_MAGIC) and len(data) >= min_bytes
