from .service import PasskeyService
from .dispatcher import ActionDispatcher
from .handler import PasskeyHandler
from .rp import RelyingParty

__all__ = [
	"PasskeyService",
	"ActionDispatcher",
	"PasskeyHandler",
	"RelyingParty",
]
