"""Shared pytest configuration for the catalog test suite."""

pytest_plugins = [
    "tests.fixtures.core",
    "tests.fixtures.storage",
    "tests.fixtures.services",
    "tests.fixtures.api",
]
