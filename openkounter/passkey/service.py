import json
import logging
import secrets
import typing

import asab
import webauthn
import webauthn.helpers
import webauthn.helpers.structs

from .. import exceptions
from .rp import RelyingParty
from .store import CredentialStore, ChallengeStore, ManagementTokenStore
from .utils import decode_client_data, generate_user_id, now_ms, user_handle

#

L = logging.getLogger(__name__)

#


class PasskeyService(asab.Service):
	"""
	Passkey (WebAuthn) registration, authentication and credential management.

	Only the client data (challenge, origin and ceremony type) of the authenticator response is verified.
	The attestation, the assertion signature and the signature counter are NOT verified.
	"""

	RegistrationCeremony = "registration"
	AuthenticationCeremony = "authentication"

	def __init__(self, app, kv_storage, system_token_svc, service_name="openkounter.PasskeyService"):
		super().__init__(app, service_name)
		self.SystemTokenService = system_token_svc

		self.RelyingPartyName = asab.Config.get("openkounter:passkey", "relying_party_name")
		self.RelyingPartyId = asab.Config.get("openkounter:passkey", "relying_party_id") or None
		self.Origin = asab.Config.get("openkounter:passkey", "origin") or None
		self.UserIdSalt = asab.Config.get("openkounter:passkey", "user_id_salt")
		self.Timeout = int(asab.Config.getseconds("openkounter:passkey", "timeout") * 1000)
		self.SupportedAlgorithms = [
			webauthn.helpers.structs.COSEAlgorithmIdentifier.ECDSA_SHA_256,
			webauthn.helpers.structs.COSEAlgorithmIdentifier.RSASSA_PKCS1_v1_5_SHA_256,
		]

		self.CredentialStore = CredentialStore(kv_storage)
		self.ChallengeStore = ChallengeStore(
			kv_storage,
			self.CredentialStore,
			expiration=asab.Config.getseconds("openkounter:passkey", "challenge_expiration"),
		)
		self.ManagementTokenStore = ManagementTokenStore(
			kv_storage,
			expiration=asab.Config.getseconds("openkounter:passkey", "management_token_expiration"),
		)


	def resolve_relying_party(self, request) -> RelyingParty:
		return RelyingParty.from_request(
			request,
			name=self.RelyingPartyName,
			rp_id=self.RelyingPartyId,
			origin=self.Origin,
		)


	def generate_user_id(self, username: str) -> str:
		return generate_user_id(username, self.UserIdSalt)


	async def _clear_current_challenge(self, user: dict):
		"""
		Invalidate the user's outstanding challenge, if any
		"""
		challenge_id = user.pop("currentChallengeId", None)
		if challenge_id is not None:
			await self.ChallengeStore.delete(challenge_id)


	async def _create_challenge(self, challenge: dict, user: typing.Optional[dict]) -> str:
		challenge_id = await self.ChallengeStore.create(challenge)
		if user is not None:
			user["currentChallengeId"] = challenge_id
			await self.CredentialStore.save_user(user)
		return challenge_id


	async def _pop_challenge(self, challenge_id: str, ceremony: str) -> dict:
		"""
		Consume the challenge. It cannot be used again whatever the outcome of the verification.
		"""
		challenge = await self.ChallengeStore.pop(challenge_id)
		if challenge is None:
			L.log(asab.LOG_NOTICE, "Passkey challenge not found or expired.", struct_data={
				"challenge_id": challenge_id})
			raise exceptions.ChallengeExpiredError(challenge_id)

		if challenge.get("ceremony") != ceremony:
			L.warning("Passkey challenge used in a wrong ceremony.", struct_data={
				"challenge_id": challenge_id,
				"expected": ceremony,
				"actual": challenge.get("ceremony"),
			})
			raise exceptions.ChallengeExpiredError(challenge_id)

		return challenge


	def _verify_client_data(self, rp: RelyingParty, response: dict, challenge: dict, operation_type: str):
		client_data = decode_client_data(response)

		if client_data.get("challenge") != challenge["challenge"]:
			raise exceptions.ChallengeMismatchError()

		if client_data.get("origin") != rp.Origin:
			raise exceptions.OriginMismatchError(rp.Origin, client_data.get("origin"))

		if client_data.get("type") != operation_type:
			raise exceptions.InvalidOperationTypeError()


	async def generate_registration_options(self, rp: RelyingParty, username: str, token: str) -> dict:
		"""
		Start passkey registration for the user

		https://www.w3.org/TR/webauthn/#dictdef-publickeycredentialcreationoptions
		"""
		if not username or not token:
			raise exceptions.InvalidInputError("Username and token are required")

		if not await self.SystemTokenService.verify_token(token):
			L.warning("Passkey registration rejected: Invalid token.", struct_data={"username": username})
			raise exceptions.InvalidTokenError()

		user_id = self.generate_user_id(username)
		user = await self.CredentialStore.get_user(user_id)
		if user is not None:
			await self._clear_current_challenge(user)
			user["token"] = token
			user["updatedAt"] = now_ms()
		else:
			user = {
				"id": user_id,
				"username": username,
				"token": token,
				"credentialIds": [],
				"createdAt": now_ms(),
			}

		webauthn_user_id = user_handle(username, self.UserIdSalt)
		options = webauthn.generate_registration_options(
			rp_id=rp.Id,
			rp_name=rp.Name,
			user_id=webauthn_user_id,
			user_name=username,
			user_display_name=username,
			challenge=secrets.token_bytes(32),
			timeout=self.Timeout,
			attestation=webauthn.helpers.structs.AttestationConveyancePreference.NONE,
			authenticator_selection=webauthn.helpers.structs.AuthenticatorSelectionCriteria(
				authenticator_attachment=webauthn.helpers.structs.AuthenticatorAttachment.PLATFORM,
				resident_key=webauthn.helpers.structs.ResidentKeyRequirement.PREFERRED,
				user_verification=webauthn.helpers.structs.UserVerificationRequirement.PREFERRED,
			),
			exclude_credentials=[],
			supported_pub_key_algs=self.SupportedAlgorithms,
		)
		options = json.loads(webauthn.options_to_json(options))
		options.setdefault("excludeCredentials", [])

		challenge_id = await self._create_challenge({
			"ceremony": self.RegistrationCeremony,
			"challenge": options["challenge"],
			"userId": user_id,
			"username": username,
			"token": token,
			"webAuthnUserID": webauthn.helpers.bytes_to_base64url(webauthn_user_id),
		}, user)

		return {
			"options": options,
			"challengeId": challenge_id,
		}


	async def verify_registration(self, rp: RelyingParty, challenge_id: str, response: dict) -> dict:
		"""
		Finish passkey registration and replace any previous passkey of the user

		https://www.w3.org/TR/webauthn/#sctn-registering-a-new-credential
		"""
		if not challenge_id or not isinstance(response, dict) or not response:
			raise exceptions.InvalidInputError()

		challenge = await self._pop_challenge(challenge_id, self.RegistrationCeremony)
		self._verify_client_data(rp, response, challenge, "webauthn.create")

		credential_id = response.get("id")
		if not credential_id:
			raise exceptions.InvalidInputError("Missing credential ID")

		user_id = challenge["userId"]
		credential = {
			"id": credential_id,
			"publicKey": response["response"].get("attestationObject"),
			"counter": 0,
			"transports": response["response"].get("transports") or [],
			"deviceType": "multiDevice",
			"backedUp": True,
			"userId": user_id,
			"webAuthnUserID": challenge.get("webAuthnUserID"),
			"createdAt": now_ms(),
		}
		await self.CredentialStore.save_credential(credential)

		# One passkey per user: the new one supersedes all the previous ones
		for old_credential in await self.CredentialStore.list_user_credentials(user_id):
			if old_credential["id"] != credential_id:
				await self.CredentialStore.delete_credential(old_credential["id"])

		user = await self.CredentialStore.get_user(user_id)
		if user is not None:
			user["token"] = challenge.get("token")
			user["updatedAt"] = now_ms()
			await self.CredentialStore.save_user(user)

		L.log(asab.LOG_NOTICE, "Passkey registered.", struct_data={
			"user_id": user_id,
			"credential_id": credential_id,
		})
		return {
			"verified": True,
			"credentialId": credential_id,
		}


	async def generate_authentication_options(self, rp: RelyingParty, username: str = None) -> dict:
		"""
		Start passkey authentication. Without username, any discoverable passkey is accepted.

		https://www.w3.org/TR/webauthn/#dictdef-publickeycredentialrequestoptions
		"""
		user = None
		user_id = None
		allow_credentials = []
		if username:
			user_id = self.generate_user_id(username)
			user = await self.CredentialStore.get_user(user_id)
			if user is not None:
				await self._clear_current_challenge(user)

			credentials = await self.CredentialStore.list_user_credentials(user_id)
			if len(credentials) == 0:
				raise exceptions.CredentialNotFoundError("No passkey found for this user")

			# Credential IDs are passed through exactly as the authenticator reported them
			allow_credentials = [
				{
					"id": credential["id"],
					"type": "public-key",
					"transports": credential.get("transports") or [],
				}
				for credential in credentials
			]

		options = webauthn.generate_authentication_options(
			rp_id=rp.Id,
			challenge=secrets.token_bytes(32),
			timeout=self.Timeout,
			user_verification=webauthn.helpers.structs.UserVerificationRequirement.PREFERRED,
		)
		options = json.loads(webauthn.options_to_json(options))
		options["allowCredentials"] = allow_credentials

		challenge_id = await self._create_challenge({
			"ceremony": self.AuthenticationCeremony,
			"challenge": options["challenge"],
			"userId": user_id,
		}, user)

		return {
			"options": options,
			"challengeId": challenge_id,
		}


	async def _verify_assertion(self, rp: RelyingParty, challenge_id: str, response: dict):
		"""
		Consume the challenge, resolve the responding credential and its owner and check the client data

		https://www.w3.org/TR/webauthn/#sctn-verifying-assertion
		"""
		if not challenge_id or not isinstance(response, dict) or not response:
			raise exceptions.InvalidInputError()

		challenge = await self._pop_challenge(challenge_id, self.AuthenticationCeremony)

		credential_id = response.get("id")
		credential = await self.CredentialStore.get_credential(credential_id) if credential_id else None
		if credential is None:
			raise exceptions.CredentialNotFoundError(credential_id=credential_id)

		user = await self.CredentialStore.get_user(credential["userId"])
		if user is None:
			raise exceptions.UserNotFoundError(credential["userId"])

		try:
			self._verify_client_data(rp, response, challenge, "webauthn.get")
		except exceptions.VerificationError as e:
			L.warning("Passkey assertion rejected: {}".format(e.Reason), struct_data={
				"user_id": user["id"],
				"credential_id": credential_id,
			})
			raise

		return credential, user


	async def verify_authentication(self, rp: RelyingParty, challenge_id: str, response: dict) -> dict:
		"""
		Finish passkey authentication and hand back the user's access token
		"""
		credential, user = await self._verify_assertion(rp, challenge_id, response)

		credential["lastUsedAt"] = now_ms()
		await self.CredentialStore.save_credential(credential)

		L.log(asab.LOG_NOTICE, "Passkey authentication successful.", struct_data={
			"user_id": user["id"],
			"credential_id": credential["id"],
		})
		return {
			"verified": True,
			"username": user["username"],
			"token": user.get("token"),
		}


	async def generate_management_token(self, rp: RelyingParty, challenge_id: str, response: dict) -> dict:
		"""
		Finish passkey authentication with a short-lived management token instead of the access token
		"""
		credential, user = await self._verify_assertion(rp, challenge_id, response)
		management_token = await self.ManagementTokenStore.create(credential["userId"])
		return {
			"managementToken": management_token,
			"username": user["username"],
		}


	async def list_credentials(self, username: str) -> typing.List[dict]:
		"""
		List the user's passkeys without their public key material
		"""
		if not username:
			raise exceptions.InvalidInputError("Username is required")

		result = []
		for credential in await self.CredentialStore.list_user_credentials(self.generate_user_id(username)):
			item = {
				"id": credential["id"],
				"deviceType": credential.get("deviceType"),
				"backedUp": credential.get("backedUp"),
				"createdAt": credential.get("createdAt"),
			}
			if "lastUsedAt" in credential:
				item["lastUsedAt"] = credential["lastUsedAt"]
			result.append(item)
		return result


	async def delete_credential(self, credential_id: str, username: str, management_token: str) -> dict:
		"""
		Delete the user's passkey. Requires a management token issued to the same user.
		"""
		if not credential_id or not username:
			raise exceptions.InvalidInputError("Credential ID and username are required")

		if not management_token:
			raise exceptions.InvalidInputError("Management token required")

		credential = await self.CredentialStore.get_credential(credential_id)
		if credential is None:
			raise exceptions.CredentialNotFoundError(credential_id=credential_id)

		user_id = self.generate_user_id(username)
		if credential["userId"] != user_id:
			L.warning("Passkey deletion rejected: Credential belongs to another user.", struct_data={
				"credential_id": credential_id,
				"user_id": user_id,
			})
			raise exceptions.UnauthorizedError()

		if not await self.ManagementTokenStore.validate(management_token, user_id):
			raise exceptions.InvalidManagementTokenError()

		await self.CredentialStore.delete_credential(credential_id)
		# Management tokens are single-use
		await self.ManagementTokenStore.delete(management_token)

		return {"deleted": True}


	async def cancel_challenge(self, challenge_id: str = None):
		"""
		Discard a challenge of an abandoned ceremony. Missing or expired challenges are ignored.
		"""
		if challenge_id:
			await self.ChallengeStore.pop(challenge_id)
