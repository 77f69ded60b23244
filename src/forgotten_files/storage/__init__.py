"""
Forgotten Files Storage Module.

Provides the storage gateway protocol consumed by the command layer and
the filesystem backend that implements it.
"""

from .base import StorageGateway, split_doc_id
from .filesystem import FileSystemStorage

__all__ = [
    "StorageGateway",
    "FileSystemStorage",
    "split_doc_id",
]
