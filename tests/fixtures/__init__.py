"""Shared pytest fixtures for catalog tests."""
