from .connection import PeerConnection, format_address
from .console import Console
from .session import ChatSession, Role, SessionOutcome, SessionState

__all__ = ["PeerConnection", "format_address", "Console", "ChatSession", "Role", "SessionOutcome", "SessionState"]
