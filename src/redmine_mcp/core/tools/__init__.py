"""
Tool families exposed by redmine-mcp, in catalog order.

Each module publishes a ``TOOLS`` list of descriptors.
"""

TOOL_FAMILIES = ("issues", "projects", "users", "time_entries")

__all__ = ["TOOL_FAMILIES"]
