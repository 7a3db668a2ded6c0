from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Iterable, List, Sequence

from .catalog import ToolCatalog, ToolDescriptor
from .tools import TOOL_FAMILIES

log = logging.getLogger("redmine_mcp.core.registry")

TOOLS_PACKAGE = "redmine_mcp.core.tools"


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = TOOLS_PACKAGE,
    families: Sequence[str] = TOOL_FAMILIES,
) -> List[ModuleType]:
    """Import the tool family modules in catalog order.

    Import failures propagate and stop the server at startup.
    """
    return [
        importlib.import_module(f"{package_name}.{family}") for family in families
    ]


def iter_tool_descriptors(module: ModuleType) -> Iterable[ToolDescriptor]:
    """Yield the descriptors a family module publishes in its TOOLS list."""
    tools = getattr(module, "TOOLS", None)
    if tools is None:
        log.debug("Skipping %s: no TOOLS list", module.__name__)
        return
    for descriptor in tools:
        if not isinstance(descriptor, ToolDescriptor):
            raise TypeError(
                f"{module.__name__}.TOOLS contains a non-descriptor: {descriptor!r}"
            )
        yield descriptor


# --- Catalog assembly ------------------------------------------------------ #


def build_catalog(modules: List[ModuleType] | None = None) -> ToolCatalog:
    """Register every discovered descriptor; duplicate names raise ValueError."""
    catalog = ToolCatalog()
    modules = modules if modules is not None else discover_tool_modules()

    for module in modules:
        for descriptor in iter_tool_descriptors(module):
            catalog.register(descriptor)
            log.debug("Registered tool: %s (%s)", descriptor.name, module.__name__)

    log.info("Tool catalog ready with %d tools", len(catalog))
    return catalog


__all__ = [
    "TOOLS_PACKAGE",
    "build_catalog",
    "discover_tool_modules",
    "iter_tool_descriptors",
]
