"""Controllers exposing mcpr over MCP transports."""
