"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (backend REST API,
    object storage, places provider, session stores, settings files) used by
    use cases and view models.

Dependencies:
    Individual submodules depend on ``requests``, filesystem APIs, and domain
    protocol definitions.

Call context:
    Imported by ``destmap.app.controller`` (for runtime wiring) and by tests
    (for transport-level behavior verification).
"""
