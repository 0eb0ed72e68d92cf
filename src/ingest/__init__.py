"""Raw extract ingestion and reconciliation runs.

This package reads raw bronze extracts into typed records and drives
per-entity reconciliation runs into the silver store.
"""
