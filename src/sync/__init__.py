"""Snapshot and sync pipeline.

This package copies live source databases into throwaway snapshots,
decodes their rows, and replaces the cache tables.
"""
