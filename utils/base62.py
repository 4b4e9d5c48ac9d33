"""
Base62 codec.

Converts unsigned 64-bit integers to and from base62 strings over the
alphabet 0-9, A-Z, a-z, most significant digit first. Strings of equal
length sort lexicographically in the same order as the integers they encode.
"""

from types import MappingProxyType

from core.errors import Base62OverflowError, EmptyInputError, InvalidCharacterError

BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
RADIX = len(BASE62)
ZERO = BASE62[0]
U64_MAX = 2**64 - 1

# 62**11 > 2**64 > 62**10
MAX_ENCODED_LENGTH = 11

_DIGITS = MappingProxyType({char: value for value, char in enumerate(BASE62)})


def encode(value, width=None):
    """Encode a u64 to base62. Left-pads with "0" up to `width` when given."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected an integer, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"Value {value} is outside the unsigned 64-bit range")

    chars = []
    while True:
        value, remainder = divmod(value, RADIX)
        chars.append(BASE62[remainder])
        if value == 0:
            break

    encoded = "".join(reversed(chars))
    if width:
        encoded = encoded.rjust(width, ZERO)
    return encoded


def decode_digit(char, position=None):
    """Value of a single base62 symbol."""
    try:
        return _DIGITS[char]
    except KeyError:
        raise InvalidCharacterError(char, position) from None


def decode(text):
    """
    Decode a base62 string to a u64.

    Raises EmptyInputError for "", InvalidCharacterError for symbols outside
    the alphabet and Base62OverflowError when the value needs more than 64 bits.
    """
    if not text:
        raise EmptyInputError()

    result = 0
    for position, char in enumerate(text):
        result = result * RADIX + decode_digit(char, position)
        if result > U64_MAX:
            raise Base62OverflowError(text)
    return result
