#!/usr/bin/env python3
"""
Text Relay Server - Main Entry Point

Starts the relay with:
- A line-delimited TCP listener
- A WebSocket listener

Usage:
    python main_server.py

Optional arguments:
    --host HOST               Bind address (default: 0.0.0.0)
    --port PORT               TCP port (default: 9000)
    --ws-port PORT            WebSocket port (default: 9001)
    --no-websocket            Disable the WebSocket listener
    --default-username NAME   Name used until a client sends /u
    --close-on-unsupported    Close connections that send binary payloads
    --log-dir DIR             Log directory (default: logs)
    --log-level LEVEL         DEBUG, INFO, WARNING or ERROR
"""

if __name__ == "__main__":
    import sys

    from server.main_server import main

    sys.exit(main())
