"""Raw Stacks transaction decoding through an external decoder service."""

from .decoder import TransactionDecoder, normalize_raw_hex, stringify_integers

__all__ = ["TransactionDecoder", "normalize_raw_hex", "stringify_integers"]
