"""Silver output storage and versioning layer.

This package publishes immutable, versioned entity outputs and keeps
the per-entity catalog that points at the active version.
"""
