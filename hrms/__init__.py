"""HRMS Application Package: multi-tenant human resources API.

Invariants:
    - Package root contains no executable code (no import side-effects)
"""
