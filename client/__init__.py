"""
Client package for the text relay.

This package contains the terminal client:
- Chat line sending and display
- Configuration and utilities
"""
