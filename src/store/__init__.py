"""Cache storage layer.

This package persists decoded vehicle and player rows in SQLite.
It powers the list and detail reads exposed by the SDK.
"""
