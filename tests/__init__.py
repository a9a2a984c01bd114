"""
Test suite for urat

Contains:
- tests/unit/          : Unit tests for individual modules
"""
