"""
Test suite for parametric-pool

Contains:
- tests/unit/          : Unit tests for individual modules and pool scenarios
"""
