"""Punchline Application Package — joke generation service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
