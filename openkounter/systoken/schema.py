AUTH = {
	"type": "object",
	"properties": {
		"action": {"type": "string"},
		"token": {"type": ["string", "null"]},
		"newToken": {"type": ["string", "null"]},
		"managementToken": {"type": ["string", "null"]},
	},
}


INIT = {
	"type": "object",
	"properties": {
		"token": {"type": ["string", "null"]},
	},
}
