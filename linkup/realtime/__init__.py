"""Realtime infrastructure (Socket.IO).

This package holds the chat presence relay: connection bookkeeping, payload
parsing, event routing, and the Socket.IO binding that feeds it.
"""
