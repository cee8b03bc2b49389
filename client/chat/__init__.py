"""
Chat module for client-side messaging functionality.

Handles:
- Nickname handshake
- Sending chat lines
- Receiving broadcast lines
"""
