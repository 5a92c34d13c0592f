import json
import typing

from ...storage import KVStorageABC


class RecordStoreABC:
	"""
	JSON record layer over the key-value storage
	"""

	def __init__(self, kv_storage: KVStorageABC):
		self.KVStorage = kv_storage


	async def _get_record(self, key: str) -> typing.Optional[dict]:
		value = await self.KVStorage.get(key)
		if value is None:
			return None
		return json.loads(value)


	async def _put_record(self, key: str, record: dict, ttl: typing.Optional[float] = None):
		await self.KVStorage.put(key, json.dumps(record), ttl=ttl)
