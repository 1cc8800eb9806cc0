"""Zendesk tool modules discovered by ``zendesk_mcp.core.registry``."""
