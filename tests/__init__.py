#!/usr/bin/env python3
"""
Test suite for ChoreMatch.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the database-backed tests
    python -m pytest tests/ -v -m "not db"

    # Using unittest
    python -m unittest discover tests -v

Database-backed tests run against a throwaway SQLite file, so no external
database is needed.
"""
