# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TLS trust store assembly for HTTPS transports."""

from __future__ import annotations

import logging
import os
import re
import ssl
from dataclasses import dataclass, field

from ..config import ClientConfig
from ..errors import ClientCertificateError

logger = logging.getLogger(__name__)

_PEM_CERT_RE = re.compile(r"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----", re.DOTALL)


@dataclass
class TrustStoreReport:
    """What went into the trust pool of an SSLContext."""

    system_roots_attempted: bool = False
    system_root_count: int = 0
    loaded_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    certificates_added: int = 0
    client_certificates: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "system_roots_attempted": self.system_roots_attempted,
            "system_root_count": self.system_root_count,
            "loaded_files": list(self.loaded_files),
            "skipped_files": list(self.skipped_files),
            "certificates_added": self.certificates_added,
            "client_certificates": self.client_certificates,
        }


def add_cert_file(context: ssl.SSLContext, path: str, report: TrustStoreReport) -> int:
    """
    Add every PEM certificate found in ``path`` to the context's trust pool.

    Each certificate block is loaded on its own so a corrupt block does not
    drop the valid ones next to it. Files that cannot be read, or that yield
    no certificate, are recorded as skipped.
    """
    try:
        with open(path, encoding="ascii", errors="replace") as fh:
            data = fh.read()
    except OSError as exc:
        logger.debug("skipping unreadable CA file %s: %s", path, exc)
        report.skipped_files.append(path)
        return 0

    added = 0
    for block in _PEM_CERT_RE.findall(data):
        try:
            context.load_verify_locations(cadata=block)
        except ssl.SSLError as exc:
            logger.debug("skipping unparseable certificate in %s: %s", path, exc)
            continue
        added += 1

    if added:
        report.loaded_files.append(path)
        report.certificates_added += added
    else:
        logger.debug("no usable certificate in CA file %s", path)
        report.skipped_files.append(path)
    return added


def add_cert_dir(context: ssl.SSLContext, directory: str, report: TrustStoreReport) -> None:
    """Add certificates from every regular file directly inside ``directory``."""
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as exc:
        logger.debug("skipping unreadable CA directory %s: %s", directory, exc)
        return

    for entry in entries:
        # Regular files only: opening a FIFO or device node would block.
        try:
            if not entry.is_file():
                continue
        except OSError:
            continue
        add_cert_file(context, entry.path, report)


def build_ssl_context(config: ClientConfig) -> tuple[ssl.SSLContext, TrustStoreReport]:
    """
    Build the client-side SSLContext for an HTTPS backend.

    The trust pool starts from the system roots (an empty pool if they cannot
    be loaded) and is extended with ``ca_file`` and the files in ``ca_path``.
    Only a broken client certificate/key pair aborts construction.
    """
    report = TrustStoreReport()
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    try:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)
        report.system_roots_attempted = True
        # Hashed capath directories load lazily and are not counted here.
        report.system_root_count = context.cert_store_stats()["x509_ca"]
    except (ssl.SSLError, OSError) as exc:
        logger.warning("system trust roots unavailable, starting from an empty pool: %s", exc)

    if config.ca_file is not None:
        add_cert_file(context, config.ca_file, report)

    if config.ca_path is not None:
        add_cert_dir(context, config.ca_path, report)

    if report.skipped_files:
        logger.warning("skipped %d CA file(s) without usable certificates", len(report.skipped_files))

    if config.self_signed_cert:
        # check_hostname must be cleared before verify_mode can drop to CERT_NONE.
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    if config.has_cert_and_key:
        cert_path = config.client_cert_path
        key_path = config.client_key_path
        try:
            context.load_cert_chain(certfile=cert_path, keyfile=key_path)
        except (ssl.SSLError, OSError) as exc:
            raise ClientCertificateError(cert_path, key_path, str(exc)) from exc
        report.client_certificates = 1

    return context, report


__all__ = ["TrustStoreReport", "add_cert_dir", "add_cert_file", "build_ssl_context"]
