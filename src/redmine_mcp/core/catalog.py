from __future__ import annotations

import copy
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Type

from .client import RedmineClient
from .models import ToolInput
from .results import Result

Handler = Callable[[RedmineClient, Any], Awaitable[Result]]


@dataclass(frozen=True)
class ToolDescriptor:
    """Catalog entry: one named operation, its input model and its handler."""

    name: str
    description: str
    input_model: Type[ToolInput]
    handler: Handler = field(compare=False)

    @cached_property
    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()

    def advertise(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


class ToolCatalog:
    """Ordered, name-unique registry of tool descriptors."""

    def __init__(self, descriptors: Optional[List[ToolDescriptor]] = None):
        self._tools: Dict[str, ToolDescriptor] = {}
        for descriptor in descriptors or []:
            self.register(descriptor)

    def register(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            raise ValueError(f"Duplicate tool name detected: {descriptor.name}")
        self._tools[descriptor.name] = descriptor

    def resolve(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def list(self) -> List[Dict[str, Any]]:
        return [d.advertise() for d in self._tools.values()]

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


__all__ = ["Handler", "ToolCatalog", "ToolDescriptor"]
