import time
import unittest
import unittest.mock

from openkounter.storage import InMemoryKVStorage, KVStorageService


class InMemoryKVStorageTestCase(unittest.IsolatedAsyncioTestCase):
	maxDiff = None

	async def asyncSetUp(self):
		self.Storage = InMemoryKVStorage()


	async def test_get_put_delete(self):
		self.assertIsNone(await self.Storage.get("a"))
		await self.Storage.put("a", "1")
		self.assertEqual(await self.Storage.get("a"), "1")
		await self.Storage.put("a", "2")
		self.assertEqual(await self.Storage.get("a"), "2")

		await self.Storage.delete("a")
		self.assertIsNone(await self.Storage.get("a"))

		# Deleting a missing key is not an error
		await self.Storage.delete("a")


	async def test_list_prefix(self):
		await self.Storage.put("passkey:user:1", "u1")
		await self.Storage.put("passkey:user:2", "u2")
		await self.Storage.put("passkey:credential:1", "c1")
		await self.Storage.put("system:token", "T")

		result = await self.Storage.list("passkey:user:")
		self.assertEqual(
			sorted(result, key=lambda item: item["key"]),
			[{"key": "passkey:user:1", "value": "u1"}, {"key": "passkey:user:2", "value": "u2"}]
		)
		self.assertEqual(len(await self.Storage.list("passkey:", limit=2)), 2)


	async def test_expiration(self):
		await self.Storage.put("challenge", "x", ttl=300)
		await self.Storage.put("durable", "y")
		self.assertEqual(await self.Storage.get("challenge"), "x")

		with unittest.mock.patch("openkounter.storage.inmemory.time.time", return_value=time.time() + 299):
			self.assertEqual(await self.Storage.get("challenge"), "x")

		with unittest.mock.patch("openkounter.storage.inmemory.time.time", return_value=time.time() + 301):
			self.assertEqual(await self.Storage.list(""), [{"key": "durable", "value": "y"}])
			self.assertIsNone(await self.Storage.get("challenge"))
			self.assertEqual(await self.Storage.get("durable"), "y")

		# Expired entry has been purged on read
		self.assertNotIn("challenge", self.Storage.Dictionary)


	async def test_delete_expired(self):
		await self.Storage.put("a", "1", ttl=10)
		await self.Storage.put("b", "2", ttl=1000)
		await self.Storage.put("c", "3")

		with unittest.mock.patch("openkounter.storage.inmemory.time.time", return_value=time.time() + 100):
			self.assertEqual(await self.Storage.delete_expired(), 1)

		self.assertEqual(set(self.Storage.Dictionary.keys()), {"b", "c"})


class KVStorageServiceTestCase(unittest.IsolatedAsyncioTestCase):

	def test_inmemory_by_default(self):
		app = unittest.mock.MagicMock()
		svc = KVStorageService(app)
		self.assertIsInstance(svc.Storage, InMemoryKVStorage)
		app.PubSub.subscribe.assert_called_once_with("Application.housekeeping!", svc._on_housekeeping)


	def test_unsupported_type(self):
		app = unittest.mock.MagicMock()
		with unittest.mock.patch("asab.Config.get", return_value="postgres"):
			with self.assertRaises(ValueError):
				KVStorageService(app)


	async def test_housekeeping_purges_expired_entries(self):
		storage = InMemoryKVStorage()
		svc = KVStorageService(unittest.mock.MagicMock(), storage=storage)
		await storage.put("passkey:challenge:1", "{}", ttl=300)

		await svc._on_housekeeping("Application.housekeeping!")
		self.assertIn("passkey:challenge:1", storage.Dictionary)

		with unittest.mock.patch("openkounter.storage.inmemory.time.time", return_value=time.time() + 301):
			await svc._on_housekeeping("Application.housekeeping!")
		self.assertNotIn("passkey:challenge:1", storage.Dictionary)
