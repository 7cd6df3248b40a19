"""Multi-client chat server that relays every message to all clients."""

from __future__ import annotations

import socket
import sys
import threading
from typing import Iterable, Iterator

from sockchat.protocol import (
    DEFAULT_PORT,
    MAX_MESSAGE_SIZE,
    format_address,
    is_quit_message,
    quit_message,
)

_ACCEPT_POLL_SECONDS = 0.2
_MIN_PORT = 1024
_MAX_PORT = 49151


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class ChatServer:
    """Accepts clients and broadcasts each received message to all of them."""

    def __init__(self, port=DEFAULT_PORT, host=None, max_connections=5, backlog=10):
        self.port = str(port)
        self.host = host
        self.max_connections = max_connections
        self.backlog = backlog
        self.address = None
        self._listener: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._clients: list[socket.socket] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._closed = False

    def start(self) -> "ChatServer":
        """Bind, listen and start accepting clients in the background."""
        if self._listener is not None or self._closed:
            raise RuntimeError("server already started")
        listener = self._bind()
        try:
            listener.listen(self.backlog)
        except OSError:
            listener.close()
            raise
        listener.settimeout(_ACCEPT_POLL_SECONDS)
        self._listener = listener
        self.address = listener.getsockname()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()
        return self

    def _bind(self) -> socket.socket:
        try:
            infos = socket.getaddrinfo(
                self.host, self.port, socket.AF_UNSPEC, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
            )
        except socket.gaierror as exc:
            raise OSError(f"getaddrinfo: {exc}") from exc
        last_error: OSError | None = None
        for family, socktype, proto, _, addr in infos:
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as exc:
                last_error = exc
                continue
            try:
                sock.bind(addr)
            except OSError as exc:
                sock.close()
                last_error = exc
                continue
            return sock
        raise OSError(f"server failed to bind: {last_error}")

    def _serve(self) -> None:
        print(f"---Listening for Connections [port: {self.port}]---\n")
        while not self._stop.is_set():
            if self.client_count() >= self.max_connections:
                print("Too many clients connected please manage")
                break
            try:
                conn, addr = self._listener.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if self._stop.is_set():
                    break
                print(f"server: accept: {exc}", file=sys.stderr)
                continue
            conn.settimeout(None)
            with self._lock:
                self._clients.append(conn)
            print(f"--server got connection from:  {format_address(addr)}--")
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        try:
            while True:
                try:
                    data = conn.recv(MAX_MESSAGE_SIZE)
                except OSError as exc:
                    print(f"server: recv: {exc}", file=sys.stderr)
                    break
                if not data or is_quit_message(data):
                    break
                print(f"\nreceived: {_text(data)}\t[bytes: {len(data)}]")
                self.broadcast(data)
        finally:
            with self._lock:
                if conn in self._clients:
                    self._clients.remove(conn)
            conn.close()
            print("client disconnected")

    def broadcast(self, message) -> int:
        """Send ``message`` to every connected client; return how many got it."""
        data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
        with self._lock:
            clients = list(self._clients)
        delivered = 0
        for client in clients:
            try:
                client.sendall(data)
            except OSError as exc:
                print(f"server: send: {exc}", file=sys.stderr)
            else:
                delivered += 1
        return delivered

    def client_count(self) -> int:
        """Return the number of clients currently connected."""
        with self._lock:
            return len(self._clients)

    def close(self) -> None:
        """Tell every client the server is quitting and stop listening."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        self.broadcast(quit_message())
        with self._lock:
            clients = list(self._clients)
        for client in clients:
            try:
                client.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        if self._listener is not None:
            self._listener.close()
        if self._thread is not None:
            self._thread.join(timeout=2)

    def __enter__(self) -> "ChatServer":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def validate_port(value) -> int:
    """Return ``value`` as a port number, or raise ValueError if out of range."""
    try:
        port = int(value)
    except (TypeError, ValueError):
        port = 0
    if not _MIN_PORT <= port <= _MAX_PORT:
        raise ValueError(
            f"{port} is an Invalid Port:\tplease enter port number in range "
            f"[{_MIN_PORT}, {_MAX_PORT}]"
        )
    return port


def _commands(stream: Iterable[str]) -> Iterator[str]:
    for line in stream:
        for char in line:
            if not char.isspace():
                yield char


def main(argv=None) -> int:
    """Run the chat server with its console menu."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) > 1:
        print("usage: chatserv portNumber")
        return 1
    port = DEFAULT_PORT
    if args:
        try:
            port = str(validate_port(args[0]))
        except ValueError as exc:
            print(exc)
            return 1

    print("--- Welcome to Simple Chat App [server] ---")
    print(f"Using port: {port}\n")

    server = ChatServer(port)
    try:
        server.start()
    except OSError as exc:
        print(f"Error starting listening thread: {exc}", file=sys.stderr)
        return 1

    with server:
        print("enter h for help")
        for command in _commands(sys.stdin):
            if command == "h":
                print("\n---help menu---\n")
                print("n: number of connected clients")
                print("q: quit program")
            elif command == "n":
                print(f"{server.client_count()} Clients Currently Connected")
            elif command == "q":
                print("quitting program")
                return 0
            else:
                print(f"input: {command} not recognized")
    return 0


if __name__ == "__main__":
    sys.exit(main())