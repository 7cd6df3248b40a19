"""Chat client: sends typed words and prints what the server relays."""

from __future__ import annotations

import socket
import sys
import threading
from typing import Callable, Iterable, Iterator

from sockchat.protocol import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    MAX_MESSAGE_SIZE,
    format_address,
    is_quit_message,
    quit_message,
)

_USAGE = "usage: chatcli ip port || chatcli ip"

_HELP_TEXT = "\n".join(
    [
        "---help page---",
        "action: command",
        "quit: -q",
        "open chat: -c",
    ]
)


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class ChatClient:
    """A TCP connection to a chat server."""

    def __init__(self, host=DEFAULT_HOST, port=DEFAULT_PORT):
        self.host = host
        self.port = str(port)
        self._sock: socket.socket | None = None

    def connect(self) -> str:
        """Connect to the first usable server address and return it as text."""
        try:
            infos = socket.getaddrinfo(self.host, self.port, socket.AF_UNSPEC, socket.SOCK_STREAM)
        except socket.gaierror as exc:
            raise ConnectionError(f"addrinfo error: {exc}") from exc
        last_error: OSError | None = None
        for family, socktype, proto, _, addr in infos:
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as exc:
                last_error = exc
                continue
            try:
                sock.connect(addr)
            except OSError as exc:
                sock.close()
                last_error = exc
                continue
            self._sock = sock
            return format_address(addr)
        raise ConnectionError(f"client failed to connect: {last_error}")

    def _connected(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("not connected")
        return self._sock

    def send(self, message) -> int:
        """Send ``message`` and return the number of bytes sent."""
        data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
        self._connected().sendall(data)
        return len(data)

    def receive_loop(self, output: Callable[[str], object] = print) -> None:
        """Pass each received message to ``output`` until the server leaves."""
        sock = self._connected()
        while True:
            try:
                data = sock.recv(MAX_MESSAGE_SIZE)
            except OSError as exc:
                output(f"client: recv: {exc}")
                return
            if not data or is_quit_message(data):
                output("server disconnected")
                return
            output(f">received: {_text(data)}\t[bytes: {len(data)}]")

    def quit(self) -> None:
        """Tell the server this client is leaving."""
        self.send(quit_message())

    def close(self) -> None:
        """Close the connection if it is open."""
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()

    def __enter__(self) -> "ChatClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def parse_args(argv) -> tuple[str, str]:
    """Return ``(host, port)`` from the command-line arguments."""
    args = list(argv)
    if len(args) > 2:
        raise ValueError(_USAGE)
    host = args[0] if args else DEFAULT_HOST
    port = args[1] if len(args) == 2 else DEFAULT_PORT
    return host, port


def _words(stream: Iterable[str]) -> Iterator[str]:
    for line in stream:
        yield from line.split()


def _send(client: ChatClient, message) -> None:
    try:
        client.send(message)
    except OSError as exc:
        print(f"client: send: {exc}", file=sys.stderr)


def _chat(client: ChatClient, words: Iterator[str]) -> bool:
    """Send every word until ``-q``; return False if input ran out."""
    print("---chat page---")
    print("-q to quit")
    for word in words:
        if word == "-q":
            return True
        _send(client, word)
    return False


def main(argv=None) -> int:
    """Run the interactive chat client."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        host, port = parse_args(args)
    except ValueError as exc:
        print(exc)
        return 1

    client = ChatClient(host, port)
    try:
        address = client.connect()
    except ConnectionError:
        print("client failed to connect", file=sys.stderr)
        return 2
    print(f"client: connecting to {address}")
    print("---Connecting---\n")

    with client:
        threading.Thread(target=client.receive_loop, daemon=True).start()
        words = _words(sys.stdin)
        while True:
            print("Enter message to send: [quit -q, help -h]")
            word = next(words, None)
            if word is None or word == "-q":
                print("quitting program")
                try:
                    client.quit()
                except OSError as exc:
                    print(f"client: send: {exc}", file=sys.stderr)
                return 0
            if word.startswith("-"):
                flag = word[1:2]
                if flag == "h":
                    print(_HELP_TEXT)
                elif flag == "c":
                    if not _chat(client, words):
                        client.quit()
                        return 0
                elif flag == "q":
                    print("quitting program")
                    client.quit()
                    return 0
                else:
                    print("please enter valid flag")
            else:
                _send(client, word)


if __name__ == "__main__":
    sys.exit(main())