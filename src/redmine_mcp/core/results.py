"""Explicit outcome of a tool invocation."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from .errors import ErrorKind


def render_text(payload: Any) -> str:
    """Plain strings pass through; anything else becomes pretty-printed JSON."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


@dataclass(frozen=True)
class Success:
    payload: Any

    ok = True

    @property
    def text(self) -> str:
        return render_text(self.payload)

    def content(self) -> List[Dict[str, str]]:
        return [{"type": "text", "text": self.text}]

    def to_envelope(self) -> Dict[str, Any]:
        return {"success": True, "payload": self.payload}


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str

    ok = False

    @classmethod
    def method_not_found(cls, message: str) -> "Failure":
        return cls(ErrorKind.METHOD_NOT_FOUND, message)

    @classmethod
    def invalid_params(cls, message: str) -> "Failure":
        return cls(ErrorKind.INVALID_PARAMS, message)

    @classmethod
    def internal_error(cls, message: str) -> "Failure":
        return cls(ErrorKind.INTERNAL_ERROR, message)

    def to_envelope(self) -> Dict[str, Any]:
        return {
            "success": False,
            "errorKind": self.kind.label,
            "message": self.message,
        }


Result = Union[Success, Failure]

__all__ = ["Success", "Failure", "Result", "render_text"]
