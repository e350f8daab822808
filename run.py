#!/usr/bin/env python3
"""
Quick launcher for the HeyGen MCP server.

Usage:
    python run.py serve
    python run.py list-tools
    python run.py call add --args '{"a": 1, "b": 2}'
"""

from heygen_mcp.main import main

if __name__ == "__main__":
    main()
