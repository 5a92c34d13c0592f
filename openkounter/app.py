import logging

import asab
import asab.web
import asab.web.rest

#

L = logging.getLogger(__name__)

#


class OpenKounterApplication(asab.Application):

	def __init__(self):
		super().__init__()

		# Load modules
		self.add_module(asab.web.Module)
		if asab.Config.get("openkounter:storage", "type") == "mongodb":
			# Requires [asab:storage] type=mongodb and mongodb_uri
			import asab.storage
			self.add_module(asab.storage.Module)

		# Locate web service
		self.WebService = self.get_service("asab.WebService")

		# Create web container
		self.WebContainer = asab.web.WebContainer(self.WebService, "web")
		self.WebContainer.WebApp.middlewares.append(asab.web.rest.JsonExceptionMiddleware)

		# Init key-value storage
		from .storage import KVStorageService
		self.KVStorageService = KVStorageService(self)
		kv_storage = self.KVStorageService.Storage

		# Init System token service
		# depends on: KVStorageService
		from .systoken import SystemTokenService, SystemTokenHandler
		self.SystemTokenService = SystemTokenService(self, kv_storage)
		self.SystemTokenHandler = SystemTokenHandler(self, self.SystemTokenService)

		# Init Passkey service
		# depends on: KVStorageService, SystemTokenService
		from .passkey import PasskeyService, PasskeyHandler
		self.PasskeyService = PasskeyService(self, kv_storage, self.SystemTokenService)
		self.PasskeyHandler = PasskeyHandler(self, self.PasskeyService)

		L.log(asab.LOG_NOTICE, "Open Kounter is ready.", struct_data={
			"storage": kv_storage.Type,
			"admin_token": "configured" if self.SystemTokenService.AdminToken is not None else "not set",
		})
