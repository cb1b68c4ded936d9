from .dialer import connect

__all__ = ["connect"]
