"""
TextCompare Tests Package
=========================
Test suite for the comparison engine, its API and CLI.

Run all tests: python3 -m pytest tests/ -v
Run specific: python3 -m pytest tests/test_line_differ.py -v
"""
