"""
kairosdb client errors.

Construction problems are raised before anything is sent, response problems
abort the whole parse, and HTTP failures carry the server's payload verbatim.
"""

import json
from typing import List, Optional


class KairosError(Exception):
    """Base class for all client errors."""


class InvalidAggregatorKind(KairosError, ValueError):
    """Aggregator name is not one of the supported kinds."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"unsupported aggregator kind: {kind!r}")


class MalformedResponse(KairosError):
    """Response document is missing required structure or holds bad samples."""


class TransportError(KairosError):
    """Connection-level failure (refused, timeout, DNS)."""


class RequestFailed(KairosError):
    """Server answered with a non-success HTTP status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}" if body else f"HTTP {status}")

    @property
    def errors(self) -> Optional[List[str]]:
        """Messages from a ``{"errors": [...]}`` payload, or None if the body is not one."""
        try:
            payload = json.loads(self.body)
        except ValueError:
            return None
        if not isinstance(payload, dict) or not isinstance(payload.get("errors"), list):
            return None
        return [str(e) for e in payload["errors"]]
