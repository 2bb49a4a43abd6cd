"""MCP server and memory tools for Mnemos.

Example MCP client configuration:

    ```json
    {
      "mcpServers": {
        "mnemos": {
          "command": "python",
          "args": ["-m", "mnemos.mcp"],
          "env": {"MNEMOS_QDRANT_URL": "http://localhost:6333"}
        }
      }
    }
    ```

Available tools (5):
- mnemos_remember
- mnemos_recall
- mnemos_query_knowledge
- mnemos_forget
- mnemos_count
"""

from .server import create_server, main
from .tools import MemoryTools

__all__ = ["MemoryTools", "create_server", "main"]
