"""GitHub Project Management MCP Server.

Exposes GitHub Projects (v2), issue, pull request and repository queries as MCP tools,
each backed by one fixed GitHub GraphQL document.
"""

__version__ = "1.0.0"
