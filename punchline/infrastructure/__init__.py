"""Infrastructure — provider, identity, database, and logging adapters.

Invariants:
    - Every external failure is mapped to a core error type before leaving this package
"""
