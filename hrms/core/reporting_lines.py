"""Reporting Lines: pure checks over the employee -> manager graph.

Invariants:
    - All functions are PURE: the caller loads (employee_id, manager_id) pairs
    - An employee can never be its own (direct or indirect) manager
"""

from collections.abc import Hashable, Mapping


def would_create_cycle(
    employee_id: Hashable,
    new_manager_id: Hashable | None,
    manager_of: Mapping[Hashable, Hashable | None],
) -> bool:
    """True when making new_manager_id the manager of employee_id closes a loop."""
    seen = set()
    current = new_manager_id
    while current is not None:
        if current == employee_id:
            return True
        if current in seen:
            # pre-existing loop that does not pass through employee_id
            return False
        seen.add(current)
        current = manager_of.get(current)
    return False

