"""Tool system tests."""
