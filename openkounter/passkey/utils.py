import hashlib
import json
import time
import uuid

import webauthn.helpers

from .. import exceptions


def now_ms() -> int:
	"""
	Current UNIX time in milliseconds
	"""
	return int(time.time() * 1000)


def generate_id() -> str:
	return uuid.uuid4().hex


def user_handle(username: str, salt: str) -> bytes:
	"""
	Stable, non-reversible WebAuthn user handle derived from the username
	"""
	return hashlib.sha256("{}:{}".format(salt, username).encode("utf-8")).digest()


def generate_user_id(username: str, salt: str) -> str:
	"""
	Deterministic storage ID of the passkey user
	"""
	return webauthn.helpers.bytes_to_base64url(user_handle(username, salt))


def decode_client_data(response: dict) -> dict:
	"""
	Extract and decode `clientDataJSON` from a serialized PublicKeyCredential
	"""
	try:
		client_data_json = response["response"]["clientDataJSON"]
		client_data = json.loads(webauthn.helpers.base64url_to_bytes(client_data_json))
	except (KeyError, TypeError, ValueError) as e:
		raise exceptions.MalformedClientDataError() from e

	if not isinstance(client_data, dict):
		raise exceptions.MalformedClientDataError()
	return client_data
