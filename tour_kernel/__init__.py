"""
Tour Kernel - shared foundations for the group closing engines.

- Decimal-only money helpers with cent-scaled arithmetic
- Structured JSON logging with context propagation
- Typed exception hierarchy with machine-readable codes
"""

__version__ = "0.1.0"
