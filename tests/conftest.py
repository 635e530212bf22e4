"""
Pytest configuration.

Shared factories and the SQLite test database live in
tests/fixtures/household_fixtures.py so unittest-style classes can use them.
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )
