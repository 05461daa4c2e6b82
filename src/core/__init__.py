"""
Core mathematical primitives, value types, and contracts.

This module contains the foundational building blocks that are independent
of any external serialization framework or storage.
"""
