# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import ssl

import httpx
import pytest

from backendlink import ClientConfig, ErrorCategory, build_async_client, build_client, categorize_exception, correlation_context


def test_unix_socket_requests_reach_the_socket(unix_server):
    server, path = unix_server
    config = ClientConfig(url=f"http+unix://{path}", relative_url_root="/gitlab/")

    with build_client(config) as client, correlation_context("corr-42"):
        response = client.get("/api/v4/internal/check")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    seen = server.seen[0]
    assert seen["path"] == "/gitlab/api/v4/internal/check"
    assert seen["headers"]["Host"] == "unix"
    assert seen["headers"]["X-Request-Id"] == "corr-42"


def test_unix_socket_ignores_host_in_request_url(unix_server):
    server, path = unix_server
    with build_client(ClientConfig(url=f"http+unix://{path}")) as client:
        response = client.http.get("http://somewhere-else.invalid/ping")
    assert response.status_code == 200
    assert server.seen[0]["path"] == "/ping"


def test_async_unix_socket_request(unix_server):
    server, path = unix_server

    async def run():
        async with build_async_client(ClientConfig(url=f"http+unix://{path}")) as client:
            return await client.get("/status")

    response = asyncio.run(run())
    assert response.status_code == 200
    assert server.seen[0]["path"] == "/status"


def test_missing_socket_fails_at_request_time(tmp_path):
    with build_client(ClientConfig(url=f"http+unix://{tmp_path}/absent.sock", read_timeout_seconds=2)) as client:
        with pytest.raises(httpx.ConnectError) as excinfo:
            client.get("/")
    assert categorize_exception(excinfo.value) is ErrorCategory.CONNECTION_ERROR


def test_untrusted_certificate_is_rejected(tls_server_factory):
    _, url = tls_server_factory()
    with build_client(ClientConfig(url=url, read_timeout_seconds=5)) as client:
        with pytest.raises(httpx.ConnectError) as excinfo:
            client.get("/")
    assert categorize_exception(excinfo.value) is ErrorCategory.SSL_ERROR


def test_self_signed_tolerance_accepts_untrusted_certificate(tls_server_factory):
    server, url = tls_server_factory()
    with build_client(ClientConfig(url=url, self_signed_cert=True, read_timeout_seconds=5)) as client:
        response = client.get("/healthz")
    assert response.status_code == 200
    assert server.seen[0]["path"] == "/healthz"


def test_ca_file_trusts_server(tls_server_factory, ca_file):
    _, url = tls_server_factory()
    with build_client(ClientConfig(url=url, ca_file=str(ca_file), read_timeout_seconds=5)) as client:
        response = client.get("/")
    assert response.status_code == 200


def test_ca_directory_with_corrupt_entry_trusts_server(tmp_path, tls_server_factory, ca):
    _, url = tls_server_factory()
    ca_dir = tmp_path / "trusted"
    ca_dir.mkdir()
    (ca_dir / "backend-ca.pem").write_bytes(ca.cert_pem)
    (ca_dir / "broken.pem").write_bytes(b"-----BEGIN CERTIFICATE-----\n!!!\n-----END CERTIFICATE-----\n")

    with build_client(ClientConfig(url=url, ca_path=str(ca_dir), read_timeout_seconds=5)) as client:
        response = client.get("/")
        assert client.trust.skipped_files == [str(ca_dir / "broken.pem")]
    assert response.status_code == 200


def test_mutual_tls_presents_client_certificate(tls_server_factory, ca_file, client_pair):
    server, url = tls_server_factory(require_client_cert=True)
    cert_path, key_path = client_pair
    config = ClientConfig(url=url, ca_file=str(ca_file), read_timeout_seconds=5).with_client_cert(str(cert_path), str(key_path))

    with build_client(config) as client:
        response = client.get("/")

    assert response.status_code == 200
    subject = dict(item for rdn in server.seen[0]["peer"]["subject"] for item in rdn)
    assert subject["commonName"] == "backendlink-client"
    assert client.trust.client_certificates == 1
    # The server received our certificate and nothing else.
    expected_der = ssl.PEM_cert_to_DER_cert(cert_path.read_text())
    assert server.seen[0]["peer_der"] == expected_der
