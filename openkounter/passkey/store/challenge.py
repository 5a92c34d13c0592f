import logging
import typing

from .abc import RecordStoreABC
from .credentials import CredentialStore
from ..utils import generate_id, now_ms

#

L = logging.getLogger(__name__)

#


class ChallengeStore(RecordStoreABC):
	"""
	Short-lived, single-use WebAuthn ceremony challenges
	"""

	Prefix = "passkey:challenge:"

	def __init__(self, kv_storage, credential_store: CredentialStore, expiration: float = 300):
		super().__init__(kv_storage)
		self.CredentialStore = credential_store
		self.Expiration = expiration


	async def create(self, challenge: dict) -> str:
		"""
		Store a new challenge record and return its ID
		"""
		challenge_id = generate_id()
		record = dict(challenge)
		record["createdAt"] = now_ms()
		await self._put_record("{}{}".format(self.Prefix, challenge_id), record, ttl=self.Expiration)
		L.info("Passkey challenge created.", struct_data={
			"challenge_id": challenge_id,
			"user_id": challenge.get("userId"),
		})
		return challenge_id


	async def delete(self, challenge_id: str):
		await self.KVStorage.delete("{}{}".format(self.Prefix, challenge_id))


	async def pop(self, challenge_id: str) -> typing.Optional[dict]:
		"""
		Fetch and delete the challenge. Return None if it does not exist or has expired.

		The owner's `currentChallengeId` pointer is cleared if it still refers to this challenge.
		"""
		challenge = await self._get_record("{}{}".format(self.Prefix, challenge_id))
		if challenge is None:
			return None

		await self.delete(challenge_id)

		user_id = challenge.get("userId")
		if user_id:
			user = await self.CredentialStore.get_user(user_id)
			if user is not None and user.get("currentChallengeId") == challenge_id:
				del user["currentChallengeId"]
				await self.CredentialStore.save_user(user)

		return challenge
