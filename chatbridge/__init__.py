"""ChatBridge Orchestrator.

A small HTTP orchestrator that enriches chat messages with file content read
through an MCP resource server and forwards the composed prompt to a separately
running completion service.
"""

__version__ = "0.1.0"
