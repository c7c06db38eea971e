"""Datagram transport for requests and responses between the CLI and a client.

A response can be larger than one datagram, so it is sent as a series of
chunks followed by an empty datagram that marks its end.
"""

from __future__ import annotations

import socket
from collections.abc import Iterator
from typing import Any

from spotcli.protocol import MAX_REQUEST_SIZE, Request, Response, request_to_bytes

CHUNK_SIZE = 4096


class TransportError(Exception):
    """Raised when a message cannot be sent or received."""


def iter_chunks(data: bytes, size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield consecutive slices of ``data`` of at most ``size`` bytes."""
    if size <= 0:
        raise ValueError("chunk size must be positive")
    view = bytes(data)
    for start in range(0, len(view), size):
        yield view[start : start + size]


def send_response(sock: socket.socket, address: Any, response: Response) -> None:
    """Send ``response`` to ``address`` in chunks, ending with an empty datagram."""
    try:
        for chunk in iter_chunks(response.to_bytes()):
            sock.sendto(chunk, address)
        sock.sendto(b"", address)
    except OSError as err:
        raise TransportError(f"failed to send response: {err}") from err


def receive_response(sock: socket.socket) -> Response:
    """Collect chunks from ``sock`` until an empty datagram and decode the response."""
    parts: list[bytes] = []
    while True:
        try:
            chunk, _ = sock.recvfrom(CHUNK_SIZE)
        except OSError as err:
            raise TransportError(f"failed to receive response: {err}") from err
        if not chunk:
            break
        parts.append(chunk)
    return Response.from_bytes(b"".join(parts))


def send_request(sock: socket.socket, request: Request) -> None:
    """Send ``request`` over the connected ``sock`` as a single datagram."""
    data = request_to_bytes(request)
    if len(data) > MAX_REQUEST_SIZE:
        raise TransportError(
            f"request is {len(data)} bytes, more than the limit of {MAX_REQUEST_SIZE}"
        )
    try:
        sock.send(data)
    except OSError as err:
        raise TransportError(f"failed to send request: {err}") from err