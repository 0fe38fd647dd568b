"""
Script Tests

Tests for the command line scripts under scripts/:
- xref/: Xref loading scripts
"""
