import logging
import time
import typing

from .abc import KVStorageABC

#

L = logging.getLogger(__name__)

#


class InMemoryKVStorage(KVStorageABC):
	"""
	Process-local storage, suitable for development and tests.
	Data is lost on restart.
	"""

	Type = "inmemory"

	def __init__(self):
		# key -> (value, expires_at or None)
		self.Dictionary = {}


	async def get(self, key: str) -> typing.Optional[str]:
		entry = self.Dictionary.get(key)
		if entry is None:
			return None

		value, expires_at = entry
		if expires_at is not None and expires_at < time.time():
			del self.Dictionary[key]
			return None

		return value


	async def put(self, key: str, value: str, ttl: typing.Optional[float] = None):
		if ttl:
			expires_at = time.time() + ttl
		else:
			expires_at = None
		self.Dictionary[key] = (value, expires_at)


	async def delete(self, key: str):
		self.Dictionary.pop(key, None)


	async def list(self, prefix: str, limit: int = 1000) -> typing.List[dict]:
		now = time.time()
		result = []
		for key, (value, expires_at) in self.Dictionary.items():
			if not key.startswith(prefix):
				continue
			if expires_at is not None and expires_at < now:
				continue
			result.append({"key": key, "value": value})
			if len(result) >= limit:
				break
		return result


	async def delete_expired(self) -> int:
		now = time.time()
		expired = [
			key for key, (_, expires_at) in self.Dictionary.items()
			if expires_at is not None and expires_at < now
		]
		for key in expired:
			del self.Dictionary[key]
		return len(expired)
