"""
Record storage for quizzes and submissions.

Provides an in-memory store and a JSON-file store behind one interface.
"""

from qa_checker.storage.base import RecordStore, StorageError
from qa_checker.storage.json_store import JsonRecordStore
from qa_checker.storage.memory import InMemoryRecordStore

__all__ = [
    "InMemoryRecordStore",
    "JsonRecordStore",
    "RecordStore",
    "StorageError",
]
