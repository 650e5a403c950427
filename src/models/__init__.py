"""
Models package for the bank notification import backend.
"""

from .transaction import (
    ImportResult,
    ImportSource,
    ParsedTransaction,
    TransactionType,
)

__all__ = [
    'ImportResult',
    'ImportSource',
    'ParsedTransaction',
    'TransactionType',
]
