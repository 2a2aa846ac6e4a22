"""MCP server exposing the playbook extraction pipeline."""
