"""
Test suite for fxvault

Contains:
- tests/unit/          : Unit tests for individual modules and operation scenarios
"""
