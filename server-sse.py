#!/usr/bin/env python3
"""
HTTP/SSE transport entrypoint for the BioGeoSeed MCP Server.
Imports the FastMCP instance from server.py and runs it over HTTP.
"""

import sys
import os

# Add the current directory to the Python path
sys.path.insert(0, os.path.dirname(__file__))

# Import the existing FastMCP instance from server.py
try:
    from server import mcp
    print("Imported FastMCP instance from server.py", file=sys.stderr)
except ImportError as e:
    print(f"Failed to import FastMCP instance: {e}", file=sys.stderr)
    sys.exit(1)

HOST = os.environ.get("BIOGEOSEED_HOST", "0.0.0.0")
PORT = int(os.environ.get("BIOGEOSEED_PORT", "8000"))

if __name__ == "__main__":
    print("Starting BioGeoSeed MCP Server with HTTP transport...", file=sys.stderr)
    mcp.settings.host = HOST
    mcp.settings.port = PORT

    # Use streamable-http transport (preferred) or sse (legacy)
    try:
        mcp.run(transport="streamable-http")
    except Exception as e:
        print(f"Failed to start HTTP server: {e}", file=sys.stderr)
        print("Falling back to SSE transport...", file=sys.stderr)
        try:
            mcp.run(transport="sse")
        except Exception as e2:
            print(f"Failed to start SSE server: {e2}", file=sys.stderr)
            sys.exit(1)
