"""Services Layer: listing engine, mutation gateway, invalidation signal, paged feed.

Invariants:
    - Services orchestrate async store calls around pure core functions
    - Store faults propagate as StoreError; no service retries

Design Decisions:
    - One file per component for locality
"""
