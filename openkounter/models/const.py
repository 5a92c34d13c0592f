import enum


class ResultCode(enum.IntEnum):
	SUCCESS = 0
	FAIL = 1000
	NOT_FOUND = 1404
