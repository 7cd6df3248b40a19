"""Wire conventions shared by the chat server and client."""

from __future__ import annotations

QUIT_BYTE = 0xFF
"""First byte of a message that ends a connection."""

MAX_MESSAGE_SIZE = 255
"""Largest number of bytes read for one message."""

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "8080"


def quit_message() -> bytes:
    """Return the message that tells the other side the connection is over."""
    return bytes([QUIT_BYTE])


def is_quit_message(data: bytes | bytearray | str) -> bool:
    """Tell whether ``data`` is an end-of-connection message."""
    if not data:
        return False
    if isinstance(data, str):
        return ord(data[0]) == QUIT_BYTE
    return data[0] == QUIT_BYTE


def format_address(sockaddr: tuple | str) -> str:
    """Return the host part of a socket address as text."""
    if isinstance(sockaddr, str):
        if not sockaddr:
            raise ValueError("empty socket address")
        return sockaddr
    if not sockaddr:
        raise ValueError("empty socket address")
    return str(sockaddr[0])