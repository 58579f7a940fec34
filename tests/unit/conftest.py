# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import os
import shutil
import socket
import socketserver
import ssl
import tempfile
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path

import pytest

from .certs import IssuedCert, issue_cert, make_ca


@pytest.fixture
def ca() -> IssuedCert:
    return make_ca()


@pytest.fixture
def ca_file(tmp_path, ca) -> Path:
    path = tmp_path / "ca.pem"
    path.write_bytes(ca.cert_pem)
    return path


@pytest.fixture
def client_pair(tmp_path, ca) -> tuple[Path, Path]:
    return issue_cert(ca, "backendlink-client", client=True).write(tmp_path, "client")


class RecordingHandler(BaseHTTPRequestHandler):
    """Answers every GET with 200 and records what it received on the server."""

    def do_GET(self):  # noqa: N802
        peer = peer_der = None
        getpeercert = getattr(self.connection, "getpeercert", None)
        if getpeercert is not None:
            peer = getpeercert()
            peer_der = getpeercert(binary_form=True)
        self.server.seen.append({"path": self.path, "headers": dict(self.headers), "peer": peer, "peer_der": peer_der})
        body = b'{"ok": true}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):  # noqa: A002
        return None


def _serve(server) -> threading.Thread:
    server.seen = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return thread


@pytest.fixture
def unix_server():
    if not hasattr(socket, "AF_UNIX"):
        pytest.skip("AF_UNIX sockets are not available")
    # Short directory: AF_UNIX paths are limited to ~100 bytes.
    directory = tempfile.mkdtemp(prefix="bl-")
    path = os.path.join(directory, "backend.sock")
    server = socketserver.UnixStreamServer(path, RecordingHandler)
    thread = _serve(server)
    try:
        yield server, path
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
        shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def tls_server_factory(tmp_path, ca):
    servers = []

    def start(*, require_client_cert: bool = False):
        cert_path, key_path = issue_cert(ca, "localhost").write(tmp_path, "server")
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(cert_path, key_path)
        if require_client_cert:
            context.verify_mode = ssl.CERT_REQUIRED
            context.load_verify_locations(cadata=ca.cert_pem.decode("ascii"))
        server = HTTPServer(("127.0.0.1", 0), RecordingHandler)
        server.socket = context.wrap_socket(server.socket, server_side=True)
        thread = _serve(server)
        servers.append((server, thread))
        return server, f"https://127.0.0.1:{server.server_address[1]}"

    yield start

    for server, thread in servers:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
