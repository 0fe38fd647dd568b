"""Core configuration for the xref parsers."""
