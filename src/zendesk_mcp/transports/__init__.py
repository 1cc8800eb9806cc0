"""Process wiring: stdio and HTTP runners for the Zendesk MCP server."""
