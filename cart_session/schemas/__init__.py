"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (primitive types, required fields, enums)
    - Business rules (quantity bounds, merge limits) stay in core/, not here

Design Decisions:
    - Separate from core dataclasses: schemas are API contracts, core types are domain
"""
