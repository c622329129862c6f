"""
Chat module for server-side messaging functionality.

Handles:
- Participant registration and presence counts
- Chat line broadcasting
- Rename and quit commands
"""
