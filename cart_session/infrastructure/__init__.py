"""Infrastructure Layer — in-process storage and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Storage errors are mapped to core/errors.py types

Design Decisions:
    - Session store lives here, not in core/: it owns locks and a thread
"""
