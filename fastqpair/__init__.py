"""Pair mate 1 and mate 2 FASTQ files by read identifier."""

from fastqpair.version import __version__

__all__ = ["__version__"]
