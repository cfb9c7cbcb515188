"""Infrastructure Layer: database session management and logging setup.

Invariants:
    - Infrastructure never imports domain services
    - Driver exceptions are mapped to core/errors before leaving this layer
"""
