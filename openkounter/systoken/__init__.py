from .service import SystemTokenService
from .handler import SystemTokenHandler

__all__ = [
	"SystemTokenService",
	"SystemTokenHandler",
]
