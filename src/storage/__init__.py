"""
Portfolio Analytics - Storage Module

Durable key/value slot, cross-tab change notifications and the
persistence adapter for analytics state.
"""

from .errors import StorageError, StorageQuotaExceeded, StorageUnavailable
from .base import KeyValueBackend, MemoryBackend
from .database import SqliteBackend
from .channel import StorageChange, StorageChannel
from .area import StorageArea
from .persistence import PersistenceAdapter

__all__ = [
    'StorageError',
    'StorageQuotaExceeded',
    'StorageUnavailable',
    'KeyValueBackend',
    'MemoryBackend',
    'SqliteBackend',
    'StorageChange',
    'StorageChannel',
    'StorageArea',
    'PersistenceAdapter',
]
