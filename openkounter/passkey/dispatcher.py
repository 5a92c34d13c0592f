import logging

import asab

from .. import exceptions
from ..generic import success_result, error_result
from .rp import RelyingParty

#

L = logging.getLogger(__name__)

#


class ActionDispatcher:
	"""
	Route `{action, data}` requests to the passkey service and wrap the outcome
	in a `{code, message?, data?}` result.

	Errors never escape: domain errors carry their own result code,
	anything unexpected is reported as a generic failure.
	"""

	def __init__(self, passkey_svc):
		self.PasskeyService = passkey_svc
		self.Actions = {
			"generateRegistrationOptions": self.generate_registration_options,
			"verifyRegistration": self.verify_registration,
			"generateAuthenticationOptions": self.generate_authentication_options,
			"verifyAuthentication": self.verify_authentication,
			"generateManagementToken": self.generate_management_token,
			"listCredentials": self.list_credentials,
			"deleteCredential": self.delete_credential,
			"cancelChallenge": self.cancel_challenge,
		}


	async def dispatch(self, action: str, data: dict, rp: RelyingParty) -> dict:
		handler = self.Actions.get(action)
		if handler is None:
			return error_result("Unknown action")

		if data is None:
			data = {}

		try:
			if not isinstance(data, dict):
				raise exceptions.InvalidInputError("Invalid request data")
			return await handler(data, rp)

		except exceptions.OpenKounterError as e:
			L.log(asab.LOG_NOTICE, "Passkey action failed.", struct_data={
				"action": action,
				"code": int(e.Code),
				"reason": str(e),
			})
			return error_result(str(e), e.Code)

		except Exception as e:
			L.exception("Passkey action {!r} failed with {}.".format(action, e.__class__.__name__))
			return error_result("Passkey Error: {}".format(e))


	async def generate_registration_options(self, data, rp):
		result = await self.PasskeyService.generate_registration_options(
			rp, data.get("username"), data.get("token"))
		return success_result(result)


	async def verify_registration(self, data, rp):
		result = await self.PasskeyService.verify_registration(
			rp, data.get("challengeId"), data.get("response"))
		return success_result(result)


	async def generate_authentication_options(self, data, rp):
		result = await self.PasskeyService.generate_authentication_options(rp, data.get("username"))
		return success_result(result)


	async def verify_authentication(self, data, rp):
		result = await self.PasskeyService.verify_authentication(
			rp, data.get("challengeId"), data.get("response"))
		return success_result(result)


	async def generate_management_token(self, data, rp):
		result = await self.PasskeyService.generate_management_token(
			rp, data.get("challengeId"), data.get("response"))
		return success_result(result)


	async def list_credentials(self, data, rp):
		result = await self.PasskeyService.list_credentials(data.get("username"))
		return success_result(result)


	async def delete_credential(self, data, rp):
		result = await self.PasskeyService.delete_credential(
			data.get("credentialId"), data.get("username"), data.get("managementToken"))
		return success_result(result)


	async def cancel_challenge(self, data, rp):
		await self.PasskeyService.cancel_challenge(data.get("challengeId"))
		return success_result(message="Challenge cleared")
