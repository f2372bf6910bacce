"""JSON encoder for metric documents in the Metricbeat dropwizard layout."""

import json
import math
from typing import Any

from metricbeatpy.core.metricset import MetricSet

MODULE_NAME = "dropwizard"


def build_document(metric_set: MetricSet) -> dict[str, Any]:
    """Build the JSON-ready document for a metric set.

    Args:
        metric_set: The populated MetricSet of one export cycle.

    Returns:
        Dict with the envelope fields followed by the nested metrics,
        in the order they are written.
    """
    return {
        "@timestamp": metric_set.timestamp,
        "metricset": {"module": MODULE_NAME, "name": MODULE_NAME},
        "beat": {"name": MODULE_NAME, "hostname": metric_set.hostname},
        # Literal string, the host name is in beat.hostname
        "host": {"name": "hostname"},
        MODULE_NAME: _numeric_fields(metric_set.fields),
    }


def _numeric_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Copy nested fields, keeping only numeric leaves."""
    result: dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, dict):
            result[key] = _numeric_fields(value)
        elif _is_number(value):
            result[key] = value
    return result


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def encode_document(metric_set: MetricSet) -> bytes:
    """Encode a metric set to a UTF-8 JSON document.

    Args:
        metric_set: The populated MetricSet of one export cycle.

    Returns:
        Compact JSON bytes, ready to be used as a request body.
    """
    body = json.dumps(
        build_document(metric_set),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return body.encode("utf-8")
