# sockchat

A small TCP chat system with two parts:

- a server that relays every message it receives to all connected clients
- a console client that connects to it

Both IPv4 and IPv6 addresses work.

## Installation

    pip install .

## Running the server

    chatserv [PORT]

The server listens on port 8080 unless you give another port. The port must
be in the range 1024–49151; any other value is refused with a message.

Each message a client sends is printed on the server console. The server then
sends it to every connected client, including the client that sent it.

The server console reads single-letter commands:

| Command | Action |
|---------|--------|
| `h` | Show the help menu. |
| `n` | Show how many clients are connected. |
| `q` | Tell every client the server is shutting down, then quit. |

## Running the client

    chatcli [HOST] [PORT]

The client connects to `127.0.0.1` on port `8080` unless you give a host, or a
host and a port. A background thread prints each message the server relays.

Input is read word by word. Each word that does not start with `-` is sent to
the server as its own message. Words that start with `-` are commands:

| Command | Action |
|---------|--------|
| `-q` | Tell the server you are leaving, then quit. |
| `-h` | Show the help page. |
| `-c` | Open the chat view. |

In the chat view every word is sent, including ones that start with `-`, until
you type `-q`, which takes you back to the main prompt. Any other command
prints `please enter valid flag`. When input ends, the client tells the
server it is leaving and quits.

## Using it from Python

```python
from sockchat.server import ChatServer
from sockchat.client import ChatClient

with ChatServer(port=8080) as server:
    server.start()
    with ChatClient("127.0.0.1", "8080") as client:
        client.connect()
        client.send("hello")
        print(server.client_count())
```

### `sockchat.server`

- `ChatServer(port, host, max_connections, backlog)` is a chat server. By
  default it uses port `8080` on all addresses, allows 5 clients and has a
  backlog of 10.
  - `start()` binds the server and starts accepting clients on a background
    thread. It raises `OSError` if the server cannot bind or listen.
  - `broadcast(message)` sends a `str` or `bytes` message to every connected
    client and returns how many clients received it.
  - `client_count()` returns the number of connected clients.
  - `close()` sends the disconnect marker to every client and stops the server.
    Leaving a `with` block calls `close()`.
- `validate_port(value)` returns the port as an `int`. It raises `ValueError`
  if the port is outside 1024–49151.

### `sockchat.client`

- `ChatClient(host, port)` is a client connection. It uses `127.0.0.1` and
  `8080` by default.
  - `connect()` connects to the first address that works and returns that
    address. It raises `ConnectionError` if no address works.
  - `send(message)` sends a `str` or `bytes` message and returns the number of
    bytes sent.
  - `receive_loop(output)` passes each received message to `output` (by
    default `print`) until the server disconnects.
  - `quit()` sends the disconnect marker to the server.
  - `close()` closes the connection. Leaving a `with` block calls `close()`.
- `parse_args(argv)` returns `(host, port)` from command-line arguments. It
  raises `ValueError` if there are more than two arguments.

### `sockchat.protocol`

- `quit_message()` returns the disconnect marker, a single `0xFF` byte.
- `is_quit_message(data)` tells whether `data` starts with that marker.
- `format_address(sockaddr)` returns the host part of a socket address.

## Limitations

- Messages have no framing. Each read takes at most 255 bytes, so a long
  message or several messages sent close together can arrive split or joined.
- Clients have no names. Relayed messages do not show who sent them.
- When the number of connected clients reaches the limit, the server stops
  accepting connections. It does not start accepting again when a client
  leaves.
- Nothing is stored. There is no message history.