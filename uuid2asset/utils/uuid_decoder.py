"""
Decodes the compact 22-character identifiers used in asset manifests back into
canonical hyphenated UUID strings.
"""

from uuid2asset.exceptions import InvalidIdentifierError

_BASE64_KEYS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_VALUES = {char: value for value, char in enumerate(_BASE64_KEYS)}
_INVALID_VALUE = 64
_HEX_CHARS = "0123456789abcdef"

ENCODED_LENGTH = 22
SHORT_ID_LENGTH = 9

# Non-hyphen positions of "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx"
_UUID_TEMPLATE = "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx"
_HEX_INDICES = tuple(i for i, c in enumerate(_UUID_TEMPLATE) if c != "-")


def _symbol_value(char: str) -> int:
    return _BASE64_VALUES.get(char, _INVALID_VALUE)


def decode_uuid(encoded: str) -> str:
    """
    Decodes a compressed identifier into its canonical UUID form.

    The identifier part (text before the first '@') is decoded only when it is
    exactly 22 characters long; anything else, including the 9-character short
    form, is returned unchanged. An '@' suffix is always re-attached verbatim.

    Args:
        encoded: The identifier as it appears in the manifest.

    Returns:
        The 36-character hyphenated UUID (plus suffix), or the input itself.

    Raises:
        InvalidIdentifierError: If a symbol outside the base64 alphabet opens
            a pair, which leaves its first nibble without a hex digit.
    """
    uuid_part, sep, suffix = encoded.partition("@")
    if len(uuid_part) == SHORT_ID_LENGTH or len(uuid_part) != ENCODED_LENGTH:
        return encoded

    chars = list(_UUID_TEMPLATE)
    chars[0] = uuid_part[0]
    chars[1] = uuid_part[1]

    j = 2
    for i in range(2, ENCODED_LENGTH, 2):
        lhs = _symbol_value(uuid_part[i])
        rhs = _symbol_value(uuid_part[i + 1])
        # 64 >> 2 has no hex digit; a sentinel second value still decodes
        if lhs == _INVALID_VALUE:
            raise InvalidIdentifierError(
                f"Identifier '{uuid_part}' contains a symbol outside the base64 "
                f"alphabet at position {i}."
            )
        for nibble in (lhs >> 2, ((lhs & 3) << 2) | rhs >> 4, rhs & 0xF):
            chars[_HEX_INDICES[j]] = _HEX_CHARS[nibble]
            j += 1

    return "".join(chars) + sep + suffix
