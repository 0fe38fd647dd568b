"""
Shared utilities for the xref parsers.

Modules:
- database: Source, species and release lookups against the xref database
- file_io: Gzip-aware file opening
- logging_setup: Standardized logging configuration for scripts
"""
