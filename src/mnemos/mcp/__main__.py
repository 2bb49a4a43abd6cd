"""Entry point for running the Mnemos MCP server as a module.

Usage:
    python -m mnemos.mcp
"""

from .server import main

if __name__ == "__main__":
    main()
