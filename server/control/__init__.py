"""
Control module for server-side administration.

Handles:
- Console administrator commands (broadcast, kick, users, stop)
"""
