"""
Tests for the Lox Language.
"""
