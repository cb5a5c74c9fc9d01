"""Split raw report text into groups."""

from typing import List, Optional, Sequence, Tuple

REMARKS_MARKER = "RMK"


def tokenize(text: Optional[str]) -> List[str]:
    """
    Split a raw report into ordered, whitespace-delimited groups.

    Newlines inside multi-line TAFs are ordinary whitespace. A trailing
    "=" end-of-message marker is dropped. Never raises.

    Example:
        tokenize("KATL 052253Z 12008KT\\n  10SM=")
        # ['KATL', '052253Z', '12008KT', '10SM']
    """
    if not text:
        return []
    tokens = text.upper().split()
    if tokens and tokens[-1].endswith("="):
        last = tokens[-1].rstrip("=")
        if last:
            tokens[-1] = last
        else:
            tokens.pop()
    return tokens


def split_remarks(tokens: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split tokens at the first RMK; the RMK group starts the second part."""
    for index, token in enumerate(tokens):
        if token == REMARKS_MARKER:
            return list(tokens[:index]), list(tokens[index:])
    return list(tokens), []
