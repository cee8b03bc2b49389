"""
UI module for the server administration window (PyQt6).
"""
