from .app import advertised_tools, build_mcp_server, call_tool_content

__all__ = ["advertised_tools", "build_mcp_server", "call_tool_content"]
