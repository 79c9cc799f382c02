"""Services Layer — orchestration of core rules around the session store.

Invariants:
    - Services hold no cart state between calls; the store owns every cart
    - Services never import from api/ or schemas/

Design Decisions:
    - CartEngine as a class, not free functions: it carries configured bounds,
      clock and collaborators (ADR: dependency injection over module globals)
"""
