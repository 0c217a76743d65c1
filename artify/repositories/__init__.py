from artify.repositories.base import IDocumentRepository, IDocumentStore
from artify.repositories.memory import MemoryCollection, MemoryDocumentStore

__all__ = ["IDocumentRepository", "IDocumentStore", "MemoryCollection", "MemoryDocumentStore"]
