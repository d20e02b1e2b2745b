"""Services Layer — generation orchestration and the generate-then-save use case.

Invariants:
    - Services depend on core Protocols, never on concrete infrastructure classes
"""
