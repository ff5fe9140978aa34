"""Deterministic query identifiers."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from cachetags.types import QueryId

_SEPARATOR = b"\x00"


def _canonical_json(value: Any) -> bytes:
    """Serialize with stable key order so equal objects hash equally."""
    return json.dumps(
        value, sort_keys=True, separators=(",", ":"), default=str
    ).encode()


def derive_query_id(
    query: str,
    variables: Any = None,
    headers: Mapping[str, str] | None = None,
) -> QueryId:
    """Fingerprint a query by its text, variables and (optionally) request headers.

    The same inputs always give the same id, across processes and machines.
    Key order in ``variables`` and ``headers`` does not matter, and header
    names are compared case-insensitively.

    Args:
        query: Query document text
        variables: JSON-serializable query variables
        headers: Request headers that change the response (e.g. environment)

    Returns:
        SHA-256 hex digest
    """
    digest = hashlib.sha256(query.encode())
    digest.update(_SEPARATOR)
    if variables is not None:
        digest.update(_canonical_json(variables))
    if headers is not None:
        digest.update(_SEPARATOR)
        digest.update(
            _canonical_json({name.lower(): value for name, value in headers.items()})
        )
    return digest.hexdigest()


__all__ = ["derive_query_id"]
