from .abc import KVStorageABC
from .inmemory import InMemoryKVStorage
from .service import KVStorageService

__all__ = [
	"KVStorageABC",
	"InMemoryKVStorage",
	"KVStorageService",
]
