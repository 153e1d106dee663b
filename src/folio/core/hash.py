"""Fast hashing for cache keys and registry fingerprints (xxhash64)."""

import xxhash


def hash_string(text: str) -> str:
    """
    Hash string to a 16-character hex digest.

    Args:
        text: String to hash

    Returns:
        xxhash64 hex digest
    """
    return xxhash.xxh64(text.encode("utf-8")).hexdigest()


def hash_fields(*fields: str) -> str:
    """
    Hash multiple fields together (deterministic).

    Examples:
        >>> hash_fields("Callout", "ProjectMetrics") == hash_fields("Callout", "ProjectMetrics")
        True
    """
    return hash_string("\x00".join(fields))


__all__ = ["hash_string", "hash_fields"]
