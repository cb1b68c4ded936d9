from .acceptor import ConnectionAcceptor
from .server import ChatServer

__all__ = ["ConnectionAcceptor", "ChatServer"]
