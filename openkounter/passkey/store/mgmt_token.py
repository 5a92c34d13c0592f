import logging
import typing

import asab

from .abc import RecordStoreABC
from ..utils import generate_id, now_ms

#

L = logging.getLogger(__name__)

#


class ManagementTokenStore(RecordStoreABC):
	"""
	Short-lived step-up tokens bound to a passkey user
	"""

	Prefix = "passkey:mgmt_token:"

	def __init__(self, kv_storage, expiration: float = 300):
		super().__init__(kv_storage)
		self.Expiration = expiration


	async def create(self, user_id: str) -> str:
		token_id = generate_id()
		await self._put_record("{}{}".format(self.Prefix, token_id), {
			"userId": user_id,
			"createdAt": now_ms(),
		}, ttl=self.Expiration)
		L.log(asab.LOG_NOTICE, "Management token issued.", struct_data={"user_id": user_id})
		return token_id


	async def get(self, token_id: str) -> typing.Optional[dict]:
		return await self._get_record("{}{}".format(self.Prefix, token_id))


	async def validate(self, token_id: str, user_id: str) -> bool:
		"""
		Check that the token exists, has not expired and is bound to the user
		"""
		token = await self.get(token_id)
		if token is None:
			return False
		return token.get("userId") == user_id


	async def delete(self, token_id: str):
		await self.KVStorage.delete("{}{}".format(self.Prefix, token_id))
