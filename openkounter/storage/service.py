import logging

import asab

from .abc import KVStorageABC

#

L = logging.getLogger(__name__)

#


class KVStorageService(asab.Service):
	"""
	Select and hold the key-value storage backend, and purge expired entries on housekeeping.
	"""

	def __init__(self, app, service_name="openkounter.KVStorageService", storage: KVStorageABC = None):
		super().__init__(app, service_name)
		if storage is None:
			storage = self._create_storage(app)
		self.Storage = storage

		app.PubSub.subscribe("Application.housekeeping!", self._on_housekeeping)


	def _create_storage(self, app) -> KVStorageABC:
		storage_type = asab.Config.get("openkounter:storage", "type")
		if storage_type == "inmemory":
			from .inmemory import InMemoryKVStorage
			return InMemoryKVStorage()

		elif storage_type == "mongodb":
			from .mongodb import MongoDBKVStorage
			return MongoDBKVStorage(
				app.get_service("asab.StorageService"),
				collection=asab.Config.get("openkounter:storage", "collection"),
			)

		raise ValueError("Unsupported storage 'type' value: {!r}".format(storage_type))


	async def _on_housekeeping(self, event_name):
		await self.delete_expired()


	async def delete_expired(self) -> int:
		count = await self.Storage.delete_expired()
		if count > 0:
			L.info("Expired storage entries deleted.", struct_data={
				"type": self.Storage.Type,
				"count": count,
			})
		return count
