"""Fast hashing for non-cryptographic use cases.

xxhash64 fingerprints the injected view blob for resource etags.
"""

import xxhash


def hash_string(text: str) -> str:
    """
    Hash a string to a hex digest.

    Args:
        text: Text to hash (UTF-8 encoded)

    Returns:
        xxhash64 hex digest
    """
    return xxhash.xxh64(text.encode("utf-8")).hexdigest()


def etag(text: str) -> str:
    """Strong HTTP entity tag for a rendered blob (quoted xxhash64)."""
    return f'"{hash_string(text)}"'


__all__ = ["etag", "hash_string"]
