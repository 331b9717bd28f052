import gzip

# GZIP magic header bytes
_GZIP_MAGIC = b"\x1f\x8b"


def is_gzip(data: bytes) -> bool:
    return isinstance(data, (bytes, bytearray)) and len(data) >= 2 and bytes(data[:2]) == _GZIP_MAGIC


def compress_for_storage(data: bytes, enabled: bool = True) -> bytes:
    """Gzip data when enabled. Input that is already gzip is still wrapped so the read side stays symmetric."""
    if not enabled:
        return data
    return gzip.compress(data)


def decompress_from_storage(blob: bytes, enabled: bool = True) -> bytes:
    """Inverse of compress_for_storage."""
    if not enabled:
        return blob
    if not is_gzip(blob):
        raise ValueError("blob is not gzip data")
    return gzip.decompress(blob)
