"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks of the collision
calculator that are independent of any UI (forms, clipboard, rendering).
"""
