"""Services for the specification workflow engine."""

from .persistence import DocumentPersistence
from .file_storage import FileStorage, get_file_storage
from .autosave import AutoSaveScheduler
from .document_store import DocumentStore, get_document_store

__all__ = [
    "DocumentPersistence",
    "FileStorage",
    "get_file_storage",
    "AutoSaveScheduler",
    "DocumentStore",
    "get_document_store",
]
