import logging
import typing

import asab

from .abc import RecordStoreABC

#

L = logging.getLogger(__name__)

#


class CredentialStore(RecordStoreABC):
	"""
	Durable passkey users and their credentials.

	The user record keeps the list of owned credential IDs,
	each credential record keeps the ID of its owner.
	"""

	UserPrefix = "passkey:user:"
	CredentialPrefix = "passkey:credential:"

	async def get_user(self, user_id: str) -> typing.Optional[dict]:
		return await self._get_record("{}{}".format(self.UserPrefix, user_id))


	async def save_user(self, user: dict):
		await self._put_record("{}{}".format(self.UserPrefix, user["id"]), user)


	async def get_credential(self, credential_id: str) -> typing.Optional[dict]:
		return await self._get_record("{}{}".format(self.CredentialPrefix, credential_id))


	async def save_credential(self, credential: dict):
		"""
		Store the credential and make sure it is listed in its owner's credential IDs.
		A credential ID re-registered by another user is removed from its previous owner.
		"""
		previous = await self.get_credential(credential["id"])
		if previous is not None and previous.get("userId") != credential["userId"]:
			previous_user = await self.get_user(previous.get("userId"))
			if previous_user is not None and credential["id"] in (previous_user.get("credentialIds") or []):
				previous_user["credentialIds"] = [i for i in previous_user["credentialIds"] if i != credential["id"]]
				await self.save_user(previous_user)
			L.log(asab.LOG_NOTICE, "Passkey credential transferred to another user.", struct_data={
				"credential_id": credential["id"],
				"from_user_id": previous.get("userId"),
				"to_user_id": credential["userId"],
			})

		await self._put_record("{}{}".format(self.CredentialPrefix, credential["id"]), credential)

		user = await self.get_user(credential["userId"])
		if user is None:
			return

		credential_ids = user.setdefault("credentialIds", [])
		if credential["id"] not in credential_ids:
			credential_ids.append(credential["id"])
			await self.save_user(user)


	async def list_user_credentials(self, user_id: str) -> typing.List[dict]:
		user = await self.get_user(user_id)
		if user is None:
			return []

		credentials = []
		for credential_id in user.get("credentialIds") or []:
			credential = await self.get_credential(credential_id)
			# Dangling IDs and credentials owned by someone else are skipped
			if credential is not None and credential.get("userId") == user_id:
				credentials.append(credential)
		return credentials


	async def delete_credential(self, credential_id: str) -> bool:
		"""
		Delete the credential and remove it from its owner's credential IDs.
		Return False if the credential does not exist.
		"""
		credential = await self.get_credential(credential_id)
		if credential is None:
			return False

		user = await self.get_user(credential["userId"])
		if user is not None and user.get("credentialIds"):
			user["credentialIds"] = [i for i in user["credentialIds"] if i != credential_id]
			await self.save_user(user)

		await self.KVStorage.delete("{}{}".format(self.CredentialPrefix, credential_id))
		L.log(asab.LOG_NOTICE, "Passkey credential deleted.", struct_data={
			"credential_id": credential_id,
			"user_id": credential["userId"],
		})
		return True
