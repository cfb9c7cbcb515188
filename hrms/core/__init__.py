"""Core Layer: pure domain rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are deterministic; "now"/"today" are always passed in

Design Decisions:
    - Functional core separated from the imperative shell: services load rows,
      core decides, services persist
"""
