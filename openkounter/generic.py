import typing

from .models.const import ResultCode


def success_result(data=None, message: typing.Optional[str] = None) -> dict:
	"""
	Build a successful `{code, message?, data?}` result
	"""
	result = {"code": int(ResultCode.SUCCESS)}
	if message is not None:
		result["message"] = message
	if data is not None:
		result["data"] = data
	return result


def error_result(message: str, code: int = ResultCode.FAIL) -> dict:
	"""
	Build a failed `{code, message}` result
	"""
	return {
		"code": int(code),
		"message": message,
	}
