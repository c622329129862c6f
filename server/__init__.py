"""
Server package for the text relay.

This package contains all server-side functionality including:
- Connection registry and broadcast fan-out
- Per-connection lifecycle and command handling
- TCP and WebSocket transports
- Configuration and utilities
"""
