"""Fixture-backed reference tables."""
