import socket

import pytest

from spotcli.protocol import (
    IdOrName,
    LikeRequest,
    ConnectRequest,
    ProtocolError,
    Response,
    SearchRequest,
    request_from_bytes,
)
from spotcli.transport import (
    CHUNK_SIZE,
    TransportError,
    iter_chunks,
    receive_response,
    send_request,
    send_response,
)


class _RecordingSocket:
    def __init__(self):
        self.sent_to = []
        self.sent = []

    def sendto(self, data, address):
        self.sent_to.append((bytes(data), address))
        return len(data)

    def send(self, data):
        self.sent.append(bytes(data))
        return len(data)


class _FeedingSocket:
    def __init__(self, datagrams):
        self._datagrams = list(datagrams)

    def recvfrom(self, bufsize):
        data = self._datagrams.pop(0)
        assert len(data) <= bufsize
        return data, ("127.0.0.1", 9)


class _BrokenSocket:
    def sendto(self, data, address):
        raise OSError("network down")

    def send(self, data):
        raise OSError("network down")

    def recvfrom(self, bufsize):
        raise ConnectionRefusedError("refused")


def test_iter_chunks_splits_in_order():
    assert list(iter_chunks(b"abcdefghij", 4)) == [b"abcd", b"efgh", b"ij"]


def test_iter_chunks_empty_data():
    assert list(iter_chunks(b"", 4)) == []


def test_iter_chunks_rejects_non_positive_size():
    with pytest.raises(ValueError):
        list(iter_chunks(b"abc", 0))


def test_iter_chunks_default_size_rejoins():
    data = bytes(range(256)) * 40
    chunks = list(iter_chunks(data))
    assert all(len(c) <= CHUNK_SIZE for c in chunks)
    assert b"".join(chunks) == data


def test_send_response_chunks_and_terminates():
    sock = _RecordingSocket()
    response = Response(b"x" * 5000)
    send_response(sock, ("127.0.0.1", 1234), response)
    payloads = [data for data, _ in sock.sent_to]
    assert payloads[-1] == b""
    assert all(0 < len(p) <= CHUNK_SIZE for p in payloads[:-1])
    assert b"".join(payloads) == response.to_bytes()
    assert {addr for _, addr in sock.sent_to} == {("127.0.0.1", 1234)}


def test_send_response_small_message_wire_bytes():
    sock = _RecordingSocket()
    send_response(sock, "peer", Response(b"ok"))
    assert [d for d, _ in sock.sent_to] == [b'{"Ok":[111,107]}', b""]


def test_receive_response_joins_chunks():
    wire = Response(b"error text", is_error=True).to_bytes()
    datagrams = list(iter_chunks(wire, 5)) + [b""]
    result = receive_response(_FeedingSocket(datagrams))
    assert result == Response(b"error text", is_error=True)


def test_receive_response_invalid_json():
    with pytest.raises(ProtocolError):
        receive_response(_FeedingSocket([b"not json", b""]))


def test_receive_response_socket_error():
    with pytest.raises(TransportError):
        receive_response(_BrokenSocket())


def test_send_response_socket_error():
    with pytest.raises(TransportError):
        send_response(_BrokenSocket(), "peer", Response(b"data"))


def test_send_request_round_trip():
    sock = _RecordingSocket()
    request = ConnectRequest(IdOrName(name="Kitchen speaker"))
    send_request(sock, request)
    assert len(sock.sent) == 1
    assert request_from_bytes(sock.sent[0]) == request


def test_send_request_wire_bytes():
    sock = _RecordingSocket()
    send_request(sock, LikeRequest(unlike=True))
    assert sock.sent == [b'{"Like":{"unlike":true}}']


def test_send_request_too_large():
    sock = _RecordingSocket()
    with pytest.raises(TransportError):
        send_request(sock, SearchRequest("q" * 5000))
    assert sock.sent == []


def test_send_request_socket_error():
    with pytest.raises(TransportError):
        send_request(_BrokenSocket(), LikeRequest())


def test_udp_round_trip_large_response():
    server = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    client = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        server.bind(("127.0.0.1", 0))
        client.bind(("127.0.0.1", 0))
        client.settimeout(5)
        payload = bytes(range(256)) * 20
        response = Response(payload)
        send_response(server, client.getsockname(), response)
        assert receive_response(client) == response
    finally:
        server.close()
        client.close()