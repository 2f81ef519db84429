"""Debugger integration: JSON request session and TCP server."""
