import urllib.parse

import aiohttp.hdrs


class RelyingParty:
	"""
	WebAuthn relying party identity for a single request
	"""

	def __init__(self, name: str, rp_id: str, origin: str):
		self.Name = name
		self.Id = rp_id
		self.Origin = origin

	def __repr__(self):
		return "RelyingParty(name={!r}, id={!r}, origin={!r})".format(self.Name, self.Id, self.Origin)


	@classmethod
	def from_request(cls, request, name: str, rp_id: str = None, origin: str = None):
		"""
		Resolve the relying party from the request.

		RP ID is the requested hostname (without scheme, port or path),
		the expected origin is the request's Origin header, falling back to `{scheme}://{host}`.
		Explicitly configured `rp_id` and `origin` take precedence.
		"""
		scheme = request.scheme or "http"
		host = request.host or "localhost"

		if not origin:
			origin = request.headers.get(aiohttp.hdrs.ORIGIN) or "{}://{}".format(scheme, host)

		if not rp_id:
			hostname = urllib.parse.urlparse("{}://{}".format(scheme, host)).hostname
			# https://www.w3.org/TR/webauthn-2/#relying-party-identifier
			rp_id = "localhost" if hostname == "localhost" else str(hostname)

		return cls(name, rp_id, origin)
