from .models.const import ResultCode


class OpenKounterError(Exception):
	"""
	Generic Open Kounter error, reported to the client as a failed result
	"""
	Code = ResultCode.FAIL

	def __init__(self, message=None, *args):
		if message is None:
			message = self.__class__.__doc__.strip()
		super().__init__(message, *args)


class InvalidInputError(OpenKounterError):
	"""
	Missing required parameters
	"""
	pass


class InvalidTokenError(OpenKounterError):
	"""
	Invalid token
	"""
	pass


class NotInitializedError(OpenKounterError):
	"""
	Not initialized
	"""
	pass


class AlreadyInitializedError(OpenKounterError):
	"""
	System already initialized
	"""
	pass


class ChallengeExpiredError(OpenKounterError):
	"""
	Challenge expired or invalid
	"""
	def __init__(self, challenge_id=None, *args):
		self.ChallengeId = challenge_id
		super().__init__(None, *args)


class VerificationError(OpenKounterError):
	"""
	Authenticator response does not match the ceremony
	"""
	def __init__(self, reason=None, *args):
		if reason is None:
			reason = self.__class__.__doc__.strip()
		self.Reason = reason
		super().__init__("Verification failed: {}".format(reason), *args)


class ChallengeMismatchError(VerificationError):
	"""
	Challenge mismatch
	"""
	pass


class OriginMismatchError(VerificationError):
	"""
	Origin mismatch
	"""
	def __init__(self, expected, actual, *args):
		self.Expected = expected
		self.Actual = actual
		super().__init__("Origin mismatch: expected {}, got {}".format(expected, actual), *args)


class InvalidOperationTypeError(VerificationError):
	"""
	Invalid operation type
	"""
	pass


class MalformedClientDataError(VerificationError):
	"""
	Malformed client data
	"""
	pass


class CredentialNotFoundError(OpenKounterError):
	"""
	Credential not found
	"""
	Code = ResultCode.NOT_FOUND

	def __init__(self, message=None, *args, credential_id=None):
		self.CredentialId = credential_id
		super().__init__(message, *args)


class UserNotFoundError(OpenKounterError):
	"""
	User not found
	"""
	def __init__(self, user_id=None, *args):
		self.UserId = user_id
		super().__init__(None, *args)


class UnauthorizedError(OpenKounterError):
	"""
	Unauthorized
	"""
	pass


class InvalidManagementTokenError(OpenKounterError):
	"""
	Invalid or expired management token
	"""
	pass
