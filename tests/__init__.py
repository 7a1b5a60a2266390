"""
Test suite for tree_ecdh

Contains:
- tests/unit/          : Unit tests for individual modules
"""
