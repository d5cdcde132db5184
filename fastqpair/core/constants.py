#!/usr/bin/env python3
"""Constants and type aliases used throughout the fastqpair package."""

from typing import Literal, TypeAlias

# =============================================================================
# Type Aliases
# =============================================================================
PairKey: TypeAlias = bytes
Offset: TypeAlias = int
Mate: TypeAlias = Literal[1, 2]

PairingMethod: TypeAlias = Literal["store", "seek", "iter"]
DuplicatePolicy: TypeAlias = Literal["overwrite", "keep-first", "error"]

# =============================================================================
# Record Layout
# =============================================================================
LINES_PER_RECORD = 4
"""Header, sequence, separator and quality."""

MATE_SUFFIX_LENGTH = 2
"""Characters dropped from the first header token to obtain the pair key (e.g. ".1")."""

SEPARATOR_LINE = b"+\n"
"""Separator written between sequence and quality in every output record."""

# =============================================================================
# Pairing Methods
# =============================================================================
METHOD_STORE: PairingMethod = "store"
"""Index all of mate 1 in memory, then stream mate 2."""

METHOD_SEEK: PairingMethod = "seek"
"""Index mate 1 byte offsets only and re-read matches by seeking."""

METHOD_ITER: PairingMethod = "iter"
"""Stream both files alternately, holding only unmatched records."""

PAIRING_METHODS: tuple[PairingMethod, ...] = (METHOD_STORE, METHOD_SEEK, METHOD_ITER)

DEFAULT_METHOD: PairingMethod = METHOD_STORE
DEFAULT_DUPLICATE_POLICY: DuplicatePolicy = "overwrite"
DUPLICATE_POLICIES: tuple[DuplicatePolicy, ...] = ("overwrite", "keep-first", "error")

# =============================================================================
# File Names
# =============================================================================
PAIRED_R1_NAME = "R1_paired.fastq"
"""Default file name for mate 1 records that found a partner."""

PAIRED_R2_NAME = "R2_paired.fastq"
"""Default file name for mate 2 records that found a partner."""

SINGLETONS_NAME = "Singletons.fastq"
"""Default file name for records without a partner in the other file."""

GZIP_SUFFIX = ".gz"
