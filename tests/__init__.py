"""
Test suite for hash-collision-calc

Contains:
- tests/unit/          : Unit tests for individual modules
"""
