"""Core Layer: pure listing logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Query planning and cursor arithmetic are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
    - Client-side controllers (trigger, search input) live here because they
      hold only local state and are driven by the caller's event loop
"""
