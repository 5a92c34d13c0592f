from .credentials import CredentialStore
from .challenge import ChallengeStore
from .mgmt_token import ManagementTokenStore

__all__ = [
	"CredentialStore",
	"ChallengeStore",
	"ManagementTokenStore",
]
