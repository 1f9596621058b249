"""Profile domain exports."""

from .models import SHORT_ID_LENGTH, Profile, default_profile
from .service import ProfileStore

__all__ = [
	"SHORT_ID_LENGTH",
	"Profile",
	"ProfileStore",
	"default_profile",
]
