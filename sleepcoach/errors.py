from __future__ import annotations
from typing import Any, Dict, List


class InvalidObservation(ValueError):
    """
    Raised when an observation is out of bounds or is not a well-formed number.
    `errors` is a list of {"field", "value", "reason"} dicts; formatting a
    user-facing message is left to the caller.
    """
    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        fields = ", ".join(str(e.get("field")) for e in errors) or "observation"
        super().__init__(f"invalid observation: {fields}")

    @classmethod
    def single(cls, field: str, value: Any, reason: str) -> "InvalidObservation":
        return cls([{"field": field, "value": value, "reason": reason}])

    def prefixed(self, prefix: str) -> "InvalidObservation":
        return InvalidObservation([{**e, "field": f"{prefix}.{e['field']}"} for e in self.errors])
