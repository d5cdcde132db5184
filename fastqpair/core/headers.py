#!/usr/bin/env python3
from fastqpair.core.constants import MATE_SUFFIX_LENGTH, PairKey
from fastqpair.core.exceptions import MalformedHeaderError


def parse_header(header: bytes) -> PairKey:
    """Get the part of a header that is shared between mates.

    The first whitespace-delimited token is kept and its final two
    characters, the mate number such as ``.1``, are dropped::

        b"@SRR3380692.1.1 1 length=101\\n" -> b"@SRR3380692.1"

    The dropped suffix is not validated.

    Args:
        header: Header line, with or without its line terminator.

    Returns:
        The pair key. A token of exactly two characters gives ``b""``.

    Raises:
        MalformedHeaderError: If the header has no token or the token is
            shorter than the mate suffix.
    """
    parts = header.split(None, 1)
    if not parts:
        raise MalformedHeaderError(header, "no identifier")
    token = parts[0]
    if len(token) < MATE_SUFFIX_LENGTH:
        raise MalformedHeaderError(header, f"identifier shorter than {MATE_SUFFIX_LENGTH} characters")
    return token[: len(token) - MATE_SUFFIX_LENGTH]
