import logging
import re
import time
import typing

from .abc import KVStorageABC

#

L = logging.getLogger(__name__)

#


class MongoDBKVStorage(KVStorageABC):
	"""
	Storage backed by a MongoDB collection through `asab.StorageService`.

	Each entry is a document `{"_id": key, "v": value, "exp": expires_at}`,
	where `exp` is a UNIX timestamp or None.
	"""

	Type = "mongodb"

	def __init__(self, storage_service, collection: str = "kv"):
		self.StorageService = storage_service
		self.CollectionName = collection


	@property
	def Collection(self):
		return self.StorageService.Database[self.CollectionName]


	async def get(self, key: str) -> typing.Optional[str]:
		document = await self.Collection.find_one({"_id": key})
		if document is None:
			return None

		expires_at = document.get("exp")
		if expires_at is not None and expires_at < time.time():
			await self.Collection.delete_one({"_id": key})
			return None

		return document["v"]


	async def put(self, key: str, value: str, ttl: typing.Optional[float] = None):
		document = {
			"_id": key,
			"v": value,
			"exp": time.time() + ttl if ttl else None,
		}
		await self.Collection.replace_one({"_id": key}, document, upsert=True)


	async def delete(self, key: str):
		await self.Collection.delete_one({"_id": key})


	async def list(self, prefix: str, limit: int = 1000) -> typing.List[dict]:
		query_filter = {
			"_id": {"$regex": "^{}".format(re.escape(prefix))},
			"$or": [
				{"exp": None},
				{"exp": {"$gt": time.time()}},
			],
		}
		cursor = self.Collection.find(query_filter).limit(limit)

		result = []
		async for document in cursor:
			result.append({"key": document["_id"], "value": document["v"]})
		return result


	async def delete_expired(self) -> int:
		query_filter = {"exp": {"$ne": None, "$lt": time.time()}}
		result = await self.Collection.delete_many(query_filter)
		return result.deleted_count
