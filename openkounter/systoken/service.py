import logging
import os
import typing

import asab

from .. import exceptions
from ..passkey.store import ManagementTokenStore

#

L = logging.getLogger(__name__)

#


class SystemTokenService(asab.Service):
	"""
	Manage the shared access token that protects the admin area.

	The token lives in the key-value storage under `system:token`.
	An admin token may also be supplied in configuration (or in the ADMIN_TOKEN environment variable);
	when present, it is authoritative.
	"""

	TokenKey = "system:token"

	def __init__(self, app, kv_storage, service_name="openkounter.SystemTokenService"):
		super().__init__(app, service_name)
		self.KVStorage = kv_storage
		self.ManagementTokenStore = ManagementTokenStore(
			kv_storage,
			expiration=asab.Config.getseconds("openkounter:passkey", "management_token_expiration"),
		)

		self.AdminToken = asab.Config.get("openkounter:auth", "admin_token")
		if len(self.AdminToken) == 0:
			self.AdminToken = os.getenv("ADMIN_TOKEN") or None


	async def get_stored_token(self) -> typing.Optional[str]:
		return await self.KVStorage.get(self.TokenKey)


	async def get_status(self) -> dict:
		return {
			"hasAdminToken": self.AdminToken is not None,
			"initialized": bool(await self.get_stored_token()),
		}


	async def initialize(self, token: str):
		"""
		Set the first system token. Fails if the system has already been initialized.
		"""
		if not token:
			raise exceptions.InvalidInputError("Token is required")

		if await self.get_stored_token():
			raise exceptions.AlreadyInitializedError()

		await self.KVStorage.put(self.TokenKey, token)
		L.log(asab.LOG_NOTICE, "System token initialized.")


	async def verify_token(self, token: str) -> bool:
		"""
		Check the token against the stored system token and the admin token
		"""
		if not token:
			return False
		stored_token = await self.get_stored_token()
		if stored_token and token == stored_token:
			return True
		return self.AdminToken is not None and token == self.AdminToken


	async def _get_effective_token(self) -> str:
		if self.AdminToken is not None:
			return self.AdminToken
		token = await self.get_stored_token()
		if not token:
			raise exceptions.NotInitializedError()
		return token


	async def authorize(self, token: str = None, management_token: str = None) -> typing.Optional[str]:
		"""
		Authorize the caller either with the system token or with a passkey management token.

		Return the management token ID if it was used for authorization, otherwise None.
		"""
		effective_token = await self._get_effective_token()

		if token and token == effective_token:
			return None

		if management_token:
			if await self.ManagementTokenStore.get(management_token) is not None:
				return management_token

		L.warning("System token authorization failed.")
		raise exceptions.InvalidTokenError("Invalid token or unauthorized")


	async def update(self, new_token: str, token: str = None, management_token: str = None):
		"""
		Replace the system token. The management token, if used, is consumed.
		"""
		used_management_token = await self.authorize(token=token, management_token=management_token)
		await self.KVStorage.put(self.TokenKey, new_token)

		# Management tokens are single-use
		if used_management_token is not None:
			await self.ManagementTokenStore.delete(used_management_token)

		L.log(asab.LOG_NOTICE, "System token updated.", struct_data={
			"via": "management_token" if used_management_token is not None else "token",
		})


	async def sync_admin_token(self, token: str):
		"""
		Overwrite the stored system token with the configured admin token
		"""
		await self._get_effective_token()
		if self.AdminToken is None:
			raise exceptions.OpenKounterError("ADMIN_TOKEN not configured")
		if not token or token != self.AdminToken:
			raise exceptions.InvalidTokenError("Invalid ADMIN_TOKEN")

		await self.KVStorage.put(self.TokenKey, self.AdminToken)
		L.log(asab.LOG_NOTICE, "System token synced with admin token.")
