"""Infrastructure Layer: database access, record store, logging setup.

Invariants:
    - Infrastructure implements core protocols; core never imports it
    - All SQLAlchemy exceptions mapped to StoreError before leaving this layer
"""
