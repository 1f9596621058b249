"""Identity domain exports."""

from .models import Identity, Session
from .provider import IdentityProvider, issue_custom_token
from .session import IdentitySession

__all__ = [
	"Identity",
	"IdentityProvider",
	"IdentitySession",
	"Session",
	"issue_custom_token",
]
