"""
Test suite for temporal-streams

Contains:
- tests/unit/          : Unit tests for individual modules
"""
