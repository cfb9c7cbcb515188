"""Services Layer: tenant-aware use cases over the ORM.

Invariants:
    - Services take an AsyncSession and an Actor; they never read request state
    - Authorization is decided by core/permissions before any write
    - Services raise HrmsError subclasses; routes never build error bodies
"""
