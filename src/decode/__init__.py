"""Heuristic blob decoding.

This package recognizes strings, identifiers, and skill values inside
opaque save-game blobs without a format specification.
"""
