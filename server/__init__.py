"""
Server package for the chat relay.

This package contains all server-side functionality including:
- Connection acceptance and nickname handshake
- Chat broadcasting and session reaping
- Administrator commands and the admin console window
- Configuration and utilities
"""
