"""Identity adapters - Address validation implementations."""

from .prefix import PrefixAddressValidator

__all__ = ["PrefixAddressValidator"]
