import abc
import typing


class KVStorageABC(abc.ABC):
	"""
	Key-value storage with optional per-entry expiration.

	Values are opaque strings. An entry whose expiration has passed must behave as if it was absent,
	even if it has not been physically purged yet.
	"""

	Type = "abc"

	@abc.abstractmethod
	async def get(self, key: str) -> typing.Optional[str]:
		raise NotImplementedError("in {}".format(self.Type))


	@abc.abstractmethod
	async def put(self, key: str, value: str, ttl: typing.Optional[float] = None):
		"""
		Store the value under the key. If `ttl` (in seconds) is given, the entry expires after that time.
		"""
		raise NotImplementedError("in {}".format(self.Type))


	@abc.abstractmethod
	async def delete(self, key: str):
		"""
		Delete the entry. Deleting a missing key is not an error.
		"""
		raise NotImplementedError("in {}".format(self.Type))


	@abc.abstractmethod
	async def list(self, prefix: str, limit: int = 1000) -> typing.List[dict]:
		"""
		List unexpired entries whose key starts with `prefix` as `{"key": ..., "value": ...}` dicts.
		"""
		raise NotImplementedError("in {}".format(self.Type))


	async def delete_expired(self) -> int:
		"""
		Physically purge expired entries. Return the number of purged entries.
		"""
		return 0
