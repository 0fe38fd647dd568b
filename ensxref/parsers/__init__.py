"""
Xref parsers.

Each subpackage turns one external source's distribution files into
xref object graphs and uploads them to the xref database.

Subpackages:
- uniprot: SwissProt and SPTrEMBL flat files
"""
