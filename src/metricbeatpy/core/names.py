"""Metric name normalization."""

import re

# Everything but ASCII word characters and dots
_REPLACED_CHARS = re.compile(r"[^\w.]+", re.ASCII)


def normalize_name(name: str) -> str:
    """Turn a raw metric name into a document-safe field name.

    Every run of characters outside ``[A-Za-z0-9_.]`` becomes a single
    underscore and the result is lower-cased.

    Args:
        name: Raw metric name (e.g., "My.Metric Name!")

    Returns:
        Normalized name (e.g., "my.metric_name_")
    """
    return _REPLACED_CHARS.sub("_", name).lower()


def split_name(name: str) -> list[str]:
    """Split a dotted metric name into normalized path segments.

    Segments are split on dots first and normalized one by one, so
    separators inside a segment become underscores rather than extra
    path levels. Empty segments are dropped.
    """
    return [normalize_name(segment) for segment in name.split(".") if segment]
