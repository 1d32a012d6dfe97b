"""
Prefixed address validator adapter - Implements IdentityValidator protocol.

Accepts bech32-shaped account addresses: a human-readable prefix, the
separator ``1`` and a data part drawn from the bech32 alphabet. Checksums
are not verified; the chain that issued the address is trusted for that.
"""

import re

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
# Total bech32 string length limit
MAX_ADDRESS_LENGTH = 90
# Six checksum characters plus at least one data character
MIN_DATA_LENGTH = 7


class PrefixAddressValidator:
    """
    Implements IdentityValidator protocol for one address prefix.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix.lower()
        self._pattern = re.compile(
            rf"^{re.escape(self.prefix)}1[{BECH32_CHARSET}]{{{MIN_DATA_LENGTH},}}$"
        )

    def validate(self, address: str) -> str:
        """
        Validate an address and return its normalized (lowercase) form.

        Mixed-case input is rejected; all-uppercase input is lowercased.

        Raises:
            ValueError: If the address does not match the expected shape
        """
        candidate = address.strip()
        if not candidate:
            raise ValueError("address must not be empty")
        if candidate != candidate.lower() and candidate != candidate.upper():
            raise ValueError("address must not mix upper and lower case")
        candidate = candidate.lower()
        if len(candidate) > MAX_ADDRESS_LENGTH:
            raise ValueError(f"address must be at most {MAX_ADDRESS_LENGTH} characters")
        if not self._pattern.match(candidate):
            raise ValueError(f"invalid {self.prefix} address: {address!r}")
        return candidate
