"""TCP stream sockets for a listening server or a connecting client."""

from __future__ import annotations

import socket
from enum import Enum, auto

LISTENQ = 1024


class GetAddrInfoError(Exception):
    """Name resolution for a host and port failed."""

    def __init__(self, host: str | None, port: str, error_code: int, reason: str) -> None:
        host_text = "(null)" if host is None else host
        super().__init__(f"getaddrinfo failed ({host_text}:{port}): {reason}")
        self.host = host
        self.port = port
        self.error_code = error_code


class Role(Enum):
    """Whether a socket listens for connections or makes one."""

    SERVER = auto()
    CLIENT = auto()


def _resolve(host: str | None, port: str, flags: int) -> list[tuple]:
    try:
        return socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM, flags=flags | socket.AI_ADDRCONFIG
        )
    except socket.gaierror:
        # Hosts with only loopback configured may report nothing under AI_ADDRCONFIG.
        pass
    try:
        return socket.getaddrinfo(host, port, type=socket.SOCK_STREAM, flags=flags)
    except socket.gaierror as exc:
        raise GetAddrInfoError(host, port, exc.errno, exc.strerror or str(exc)) from exc


def _open_client(host: str, port: str) -> socket.socket:
    last_error: OSError | None = None
    for family, kind, proto, _, address in _resolve(host, port, socket.AI_NUMERICSERV):
        try:
            sock = socket.socket(family, kind, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.connect(address)
        except OSError as exc:
            last_error = exc
            sock.close()
            continue
        return sock
    if last_error is not None:
        raise last_error
    raise OSError("Open_clientfd error")


def _open_listener(port: str) -> socket.socket:
    last_error: OSError | None = None
    flags = socket.AI_NUMERICSERV | socket.AI_PASSIVE
    for family, kind, proto, _, address in _resolve(None, port, flags):
        try:
            sock = socket.socket(family, kind, proto)
        except OSError as exc:
            last_error = exc
            continue
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind(address)
        except OSError as exc:
            last_error = exc
            sock.close()
            continue
        try:
            sock.listen(LISTENQ)
        except OSError:
            sock.close()
            raise
        return sock
    if last_error is not None:
        raise last_error
    raise OSError("Open_listenfd error")


class Socket:
    """A listening (SERVER) or connected (CLIENT) TCP socket.

    A server listens on ``port`` on every local address and ignores
    ``host``. Usable as a context manager; leaving it closes the socket.
    """

    def __init__(self, role: Role, host: str, port: str | int) -> None:
        if not isinstance(role, Role):
            raise ValueError("Unknown socket role")
        port_text = str(port)
        if role is Role.SERVER:
            self._sock = _open_listener(port_text)
        else:
            self._sock = _open_client(host, port_text)
        self.role = role

    def serve(self) -> tuple[socket.socket, str, str]:
        """Accept one connection; return it with the client's host and port."""
        conn, address = self._sock.accept()
        return conn, address[0], str(address[1])

    def fileno(self) -> int:
        """The descriptor of the socket, -1 once closed."""
        return self._sock.fileno()

    def close(self) -> None:
        """Close the socket; closing again does nothing."""
        self._sock.close()

    def __enter__(self) -> Socket:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def disconnect(conn: socket.socket) -> None:
    """Shut down both directions of a connection and close it."""
    conn.shutdown(socket.SHUT_RDWR)
    conn.close()