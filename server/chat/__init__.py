"""
Chat module for server-side messaging functionality.

Handles:
- Nickname handshake and connection acceptance
- Live session registry
- Ordered broadcast dispatch and dead-session reaping
- Message formatting and fan-out
"""
