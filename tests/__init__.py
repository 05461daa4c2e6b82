"""
Test suite for fixed-shape matrices

Contains:
- tests/unit/          : Unit tests for individual modules
"""
