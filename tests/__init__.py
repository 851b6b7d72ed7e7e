"""
Test suite for lazycell

Contains:
- tests/unit/          : Unit tests for individual modules
"""
