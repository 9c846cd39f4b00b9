"""
# Encoders
Conversion between integer codes and the per-segment enable masks which drive them.
"""

from typing import List

from .errors import PreconditionError


def code_to_thermometer(code: int, bits: int) -> List[bool]:
    """
    # Thermometer Encoding
    Convert `code` into a `bits`-long enable mask, in which the first `code` entries are set.

    For `bits=4`:
    * 0 becomes 0000
    * 1 becomes 1000
    * 2 becomes 1100
    * 3 becomes 1110
    * 4 becomes 1111
    """

    if code < 0 or code > bits:
        msg = f"Thermometer code {code} out of range for {bits} bits"
        raise PreconditionError(msg)
    return [True] * code + [False] * (bits - code)
