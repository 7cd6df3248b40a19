"""A small TCP chat server and client that relay messages to every connected client."""

__version__ = "0.1.0"
__all__ = ["client", "protocol", "server"]