PASSKEY_ACTION = {
	"type": "object",
	"required": ["action"],
	"properties": {
		"action": {"type": "string"},
		"data": {
			# Action-specific parameters, checked by the passkey service
			"type": ["object", "null"],
		},
	},
}
