"""
Opening of UniProt distribution files.

UniProt ships uniprot_sprot.dat and uniprot_trembl.dat gzipped, but
mirrors often hold them uncompressed under the same name, so
compression is detected from the file's first bytes rather than its
extension.
"""

import gzip
from pathlib import Path
from typing import TextIO, Union

GZIP_MAGIC = b"\x1f\x8b"


def is_gzipped(filepath: Union[str, Path]) -> bool:
    """Check whether a file starts with the gzip magic number."""
    with open(filepath, "rb") as fh:
        return fh.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def open_file(filepath: Union[str, Path], encoding: str = "utf-8") -> TextIO:
    """
    Open a plain or gzipped file for reading as text.

    Raises:
        FileNotFoundError: if the file does not exist

    Example:
        >>> with open_file(Path("uniprot_sprot.dat.gz")) as fh:
        ...     first_line = fh.readline()
    """
    if is_gzipped(filepath):
        return gzip.open(filepath, "rt", encoding=encoding)
    return open(filepath, "r", encoding=encoding)
