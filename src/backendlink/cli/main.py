# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""BackendLink CLI: build a client and report how it would connect."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import Any

from ..config import ClientConfig, load_client_config
from ..errors import BackendLinkError, categorize_exception, error_category_to_reason
from ..factory import build_client
from ..log import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build a backend client and show its transport configuration")
    parser.add_argument("url", nargs="?", help="Backend URL (http+unix://, http:// or https://); defaults to BACKENDLINK_URL")
    parser.add_argument("--relative-url-root", help="Path prefix appended to the socket host")
    parser.add_argument("--ca-file", help="Additional trusted CA certificate file")
    parser.add_argument("--ca-path", help="Directory of additional trusted CA certificates")
    parser.add_argument(
        "--self-signed-cert",
        action="store_true",
        help="Skip TLS verification (useful for self-signed backends)",
    )
    parser.add_argument("--read-timeout", type=int, help="Read timeout in seconds (0 selects the default)")
    parser.add_argument("--client-cert", help="Client certificate for mutual TLS")
    parser.add_argument("--client-key", help="Client private key for mutual TLS")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of a text summary")
    parser.add_argument("--log-level", help="Logging level (default from BACKENDLINK_LOG_LEVEL)")
    return parser


def config_from_args(args: argparse.Namespace) -> ClientConfig:
    """Overlay command-line options on the environment-backed config."""
    config = load_client_config(args.url)
    overrides: dict[str, Any] = {}
    if args.relative_url_root is not None:
        overrides["relative_url_root"] = args.relative_url_root
    if args.ca_file:
        overrides["ca_file"] = args.ca_file
    if args.ca_path:
        overrides["ca_path"] = args.ca_path
    if args.self_signed_cert:
        overrides["self_signed_cert"] = True
    if args.read_timeout is not None:
        overrides["read_timeout_seconds"] = args.read_timeout
    if args.client_cert:
        overrides["client_cert_path"] = args.client_cert
    if args.client_key:
        overrides["client_key_path"] = args.client_key
    return replace(config, **overrides)


def _pretty_print(summary: dict[str, Any]) -> None:
    print(f"[BackendLink] Host: {summary['host']}")
    print(f"Transport: {summary['transport']}")
    print(f"Timeout: {summary['timeout']:g}s")
    if summary.get("socket_path"):
        print(f"Socket: {summary['socket_path']}")
    if summary.get("tls"):
        print(f"Verify certificates: {'yes' if summary.get('verify') else 'no'}")
    trust = summary.get("trust") or {}
    if trust:
        if trust.get("system_roots_attempted"):
            print(f"System roots: {trust.get('system_root_count', 0)} counted")
        else:
            print("System roots: unavailable")
        print(f"Extra CA certificates: {trust.get('certificates_added', 0)}")
        skipped = trust.get("skipped_files") or []
        if skipped:
            print(f"Skipped CA files ({len(skipped)}): {', '.join(skipped)}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = config_from_args(args)
        client = build_client(config)
    except (BackendLinkError, ValueError) as exc:
        reason = error_category_to_reason(categorize_exception(exc)) if isinstance(exc, BackendLinkError) else ""
        print(f"error: {exc}" + (f" ({reason})" if reason else ""), file=sys.stderr)
        return 1

    with client:
        summary = client.describe()

    if args.json:
        json.dump(summary, sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        _pretty_print(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
