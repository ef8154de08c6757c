"""Uniform result envelope returned by every file operation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from examiner.core.errors import ErrorKind


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Either a payload (``success``) or an error kind and message."""

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    kind: ErrorKind | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: dict[str, Any]) -> OperationResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> OperationResult:
        return cls(success=False, kind=kind, error=message)

    def to_dict(self) -> dict[str, Any]:
        """Envelope as sent to the caller: ``{success, data | error}``."""
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
