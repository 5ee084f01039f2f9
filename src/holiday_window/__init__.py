"""
Holiday window package initialization.
"""

from fastmcp import FastMCP

from .tools import get_holidays, resolve_holiday

# Initialize FastMCP instance
mcp = FastMCP(
    name="Holiday Window",
    instructions="Resolves statutory holidays into their full days off and the make-up workdays exchanged for them.",
)

# Register tools
mcp.tool(get_holidays)
mcp.tool(resolve_holiday)

__all__ = [
    "mcp",
    "get_holidays",
    "resolve_holiday",
]
