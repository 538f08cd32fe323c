"""
Test suite for SDK Gatekeeper

Contains:
- tests/unit/          : Unit tests for individual modules
"""
