"""Test suite for Stride Agent."""
