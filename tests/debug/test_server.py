import json
import socket
import threading

import pytest

from chip8vm.debug.server import DebugServer, _parse_args
from chip8vm.debug.session import DebugSession


@pytest.fixture
def server(driver):
    srv = DebugServer("127.0.0.1", 0, DebugSession(driver))
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _exchange(server, *lines: bytes) -> list[dict]:
    host, port = server.server_address[:2]
    with socket.create_connection((host, port), timeout=5) as sock:
        stream = sock.makefile("rwb")
        replies = []
        for line in lines:
            stream.write(line + b"\n")
            stream.flush()
            replies.append(json.loads(stream.readline()))
        return replies


@pytest.mark.integration
def test_json_lines_round_trip(server):
    replies = _exchange(
        server,
        json.dumps({"id": 1, "cmd": "load", "data": "6007"}).encode(),
        json.dumps({"id": 2, "cmd": "step"}).encode(),
        json.dumps({"id": 3, "cmd": "read_reg", "index": 0}).encode(),
    )
    assert [r["id"] for r in replies] == [1, 2, 3]
    assert replies[2]["result"] == {"value": 7}


@pytest.mark.integration
def test_malformed_requests(server):
    bad_json, not_object = _exchange(server, b"{nope", b"[1, 2]")
    assert bad_json["ok"] is False
    assert "Invalid JSON" in bad_json["error"]
    assert not_object == {"ok": False, "error": "Request must be a JSON object"}


def test_parse_args_defaults():
    args = _parse_args([])
    assert args.rom is None
    assert args.host == "127.0.0.1"
    assert args.port == 3333
    assert args.gui is False
