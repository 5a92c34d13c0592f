import logging

import asab
import asab.web.rest

from ..generic import success_result
from .dispatcher import ActionDispatcher
from . import schema

#

L = logging.getLogger(__name__)

#


class PasskeyHandler(object):
	"""
	Passkey (WebAuthn) registration and login

	---
	tags: ["Passkey"]
	"""

	def __init__(self, app, passkey_svc):
		self.PasskeyService = passkey_svc
		self.Dispatcher = ActionDispatcher(passkey_svc)
		self.Version = asab.Config.get("openkounter", "version")

		web_app = app.WebContainer.WebApp
		web_app.router.add_get("/api/passkey", self.get_info)
		web_app.router.add_post("/api/passkey", self.dispatch)


	async def get_info(self, request):
		"""
		Get passkey API info
		"""
		result = success_result(message="Open Kounter Passkey API")
		result["version"] = self.Version
		return asab.web.rest.json_response(request, result)


	@asab.web.rest.json_schema_handler(schema.PASSKEY_ACTION)
	async def dispatch(self, request, *, json_data):
		"""
		Perform a passkey action

		The result is always reported in the body as `{code, message?, data?}`, `code` being 0 on success.
		"""
		rp = self.PasskeyService.resolve_relying_party(request)
		result = await self.Dispatcher.dispatch(json_data["action"], json_data.get("data"), rp)
		return asab.web.rest.json_response(request, result)
