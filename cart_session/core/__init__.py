"""Core Layer — pure domain logic, no IO, no async, no threads.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or schemas/
    - All functions are pure and deterministic (time is injected, never read implicitly
      except through a default clock argument)

Design Decisions:
    - Functional core separated from imperative shell
"""
