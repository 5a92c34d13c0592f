from .app import OpenKounterApplication

import asab

asab.Config.add_defaults({
	"web": {
		"listen": "3000",
	},

	"openkounter": {
		"version": "1.0.0",
	},

	"openkounter:auth": {
		# Admin token takes precedence over the token stored in the key-value storage
		# Falls back to the ADMIN_TOKEN environment variable if left empty
		"admin_token": "",
	},

	"openkounter:passkey": {
		"relying_party_name": "Open Kounter",

		# RP ID must match host's domain name (without scheme, port or subpath)
		# Derived from the request host if left empty
		"relying_party_id": "",

		# Expected origin of the WebAuthn client data
		# Derived from the request Origin header (or scheme and host) if left empty
		"origin": "",

		# Salt of the username digest used as the passkey user ID and WebAuthn user handle
		# Changing it orphans all registered passkeys
		"user_id_salt": "open-kounter-passkey",

		"challenge_expiration": "5 m",
		"management_token_expiration": "5 m",

		# Client-side ceremony timeout
		"timeout": "60 s",
	},

	"openkounter:storage": {
		# Key-value storage backend
		# Possible values:
		#   - "inmemory" (data is lost on restart)
		#   - "mongodb" (configure the connection in the [asab:storage] section)
		"type": "inmemory",
		"collection": "kv",
	},
})

__all__ = [
	"OpenKounterApplication",
]
