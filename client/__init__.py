"""
Client package for the chat relay.

This package contains all client-side functionality including:
- Connecting and the nickname handshake
- Sending and receiving chat lines
- User interface
- Configuration and utilities
"""
