"""
Transport module for server-side connection channels.

Handles:
- The channel contract used by the chat core
- Line-delimited TCP connections
- WebSocket connections
"""
