import logging

import asab.web.rest

from .. import exceptions
from ..generic import success_result, error_result
from . import schema

#

L = logging.getLogger(__name__)

#


class SystemTokenHandler(object):
	"""
	System token initialization, verification and rotation

	---
	tags: ["System token"]
	"""

	def __init__(self, app, system_token_svc):
		self.SystemTokenService = system_token_svc

		web_app = app.WebContainer.WebApp
		web_app.router.add_post("/api/auth", self.auth)
		web_app.router.add_post("/api/init", self.init)


	@asab.web.rest.json_schema_handler(schema.AUTH)
	async def auth(self, request, *, json_data):
		"""
		Check the system token or replace it with a new one

		The caller authorizes either with the current `token` or with a passkey `managementToken`.
		Action `get_status` requires no authorization.
		"""
		try:
			result = await self._auth(json_data)
		except exceptions.OpenKounterError as e:
			result = error_result(str(e), e.Code)
		return asab.web.rest.json_response(request, result)


	async def _auth(self, json_data: dict) -> dict:
		action = json_data.get("action")
		if action == "get_status":
			return success_result(await self.SystemTokenService.get_status())

		if action == "syncAdminToken":
			await self.SystemTokenService.sync_admin_token(json_data.get("token"))
			return success_result(message="KV token synced with ADMIN_TOKEN")

		new_token = json_data.get("newToken")
		if new_token:
			await self.SystemTokenService.update(
				new_token,
				token=json_data.get("token"),
				management_token=json_data.get("managementToken"),
			)
			return success_result(message="Token updated")

		await self.SystemTokenService.authorize(
			token=json_data.get("token"),
			management_token=json_data.get("managementToken"),
		)
		return success_result({"authorized": True})


	@asab.web.rest.json_schema_handler(schema.INIT)
	async def init(self, request, *, json_data):
		"""
		Initialize the system with its first token
		"""
		try:
			await self.SystemTokenService.initialize(json_data.get("token"))
			result = success_result(message="System initialized successfully")
		except exceptions.OpenKounterError as e:
			result = error_result(str(e), e.Code)
		return asab.web.rest.json_response(request, result)
