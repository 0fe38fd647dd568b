"""
Xref Loading Scripts

This package contains scripts that load external cross-references
into the xref database.

Scripts:
- load_uniprot_xrefs.py: Load SwissProt and SPTrEMBL xrefs from UniProt .dat files

Usage Examples:

Load human UniProt xrefs:
    python load_uniprot_xrefs.py uniprot_sprot.dat.gz --source-id 139 \\
        --species-id 9606 --release-file reldate.txt
"""
