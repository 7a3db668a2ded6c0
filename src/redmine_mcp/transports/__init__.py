"""Transport adapters that expose the core tool dispatcher over MCP."""
