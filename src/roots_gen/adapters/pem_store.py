"""
Local store adapter — PEM export + fingerprint indexing.

Adapter layer — implements the LocalStoreExporter and CertificateIndexer ports:
  - subprocess: runs the macOS `security` tool to export the system root keychain
  - asn1crypto: PEM unarmoring (label, RFC 1421 headers, DER payload)
  - cryptography (PyCA): X.509 decoding, subject names and SHA-256 fingerprints

Pipeline:
  `security find-certificate -a -p <keychain>` stdout (or a PEM file)
    → BEGIN…END segments → asn1crypto: pem.unarmor()
    → cryptography: x509.load_der_x509_certificate()
    → FingerprintIndex {sha256 hex → CertificateRecord}

The export tool's output format is not contractually guaranteed, so
indexing is best-effort: any block that is not a bare certificate, or
does not decode, is skipped without failing the scan.
"""

from __future__ import annotations

import re
import subprocess
from collections.abc import Iterator
from pathlib import Path

import structlog
from asn1crypto import pem
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from railway import ErrorCode
from railway.result import Result

from roots_gen.domain.models import CertificateRecord, FingerprintIndex

log = structlog.get_logger()

SECURITY_TOOL = "/usr/bin/security"
SYSTEM_ROOTS_KEYCHAIN = "/System/Library/Keychains/SystemRootCertificates.keychain"

CERTIFICATE_LABEL = "CERTIFICATE"

# A BEGIN line, then anything up to the matching END line as long as no other
# BEGIN line intervenes (a truncated block must not swallow its successor).
_PEM_SEGMENT = re.compile(
    rb"-----BEGIN (?P<label>[^\r\n-]+)-----"
    rb"(?:(?!-----BEGIN ).)*?"
    rb"-----END (?P=label)-----",
    re.DOTALL,
)


# ─────────────────────── PEM Blocks ───────────────────────


def iter_pem_blocks(pem_data: bytes) -> Iterator[tuple[str, dict[str, str], bytes]]:
    """
    Yield (label, headers, der_bytes) for every well-formed PEM block in `pem_data`.

    Text between blocks is ignored; a segment asn1crypto cannot unarmor is skipped.
    """
    for match in _PEM_SEGMENT.finditer(pem_data):
        try:
            label, headers, der_bytes = pem.unarmor(match.group(0))
        except ValueError as e:
            log.debug("pem.block_skipped", reason=str(e), offset=match.start())
            continue
        yield label, dict(headers), der_bytes


# ─────────────────────── Fingerprint Index ───────────────────────


def _der_to_certificate_record(der_bytes: bytes) -> CertificateRecord:
    """
    Decode DER X.509 bytes into a CertificateRecord.

    Raises ValueError when the bytes are not a parseable certificate.
    """
    cert = x509.load_der_x509_certificate(der_bytes)
    return CertificateRecord(
        certificate=der_bytes,
        subject=cert.subject.rfc4514_string(),
        fingerprint=cert.fingerprint(hashes.SHA256()).hex(),
    )


def build_fingerprint_index(pem_data: bytes) -> FingerprintIndex:
    """
    Index every decodable certificate in a PEM stream by its SHA-256 fingerprint.

    Blocks with a non-certificate label or any header are not bare
    certificate encodings and are ignored; blocks that fail to decode are
    skipped. A later certificate with the same fingerprint replaces the
    earlier one.
    """
    index: FingerprintIndex = {}
    skipped = 0

    for label, headers, der_bytes in iter_pem_blocks(pem_data):
        if label != CERTIFICATE_LABEL or headers:
            skipped += 1
            continue
        try:
            record = _der_to_certificate_record(der_bytes)
        except ValueError:
            skipped += 1
            continue
        log.debug("certificate.decoded", subject=record.subject, fingerprint=record.fingerprint)
        index[record.fingerprint] = record

    log.info("fingerprint_index.built", certificates=len(index), skipped_blocks=skipped)
    return index


class PemFingerprintIndexer:
    """
    Index a local store export by certificate fingerprint.

    Implements the CertificateIndexer port.
    """

    def index(self, pem_data: bytes) -> Result[FingerprintIndex]:
        """
        Build the FingerprintIndex for `pem_data`.

        Content problems never fail; only an unreadable stream does
        (LOCAL_EXPORT_ERROR).
        """
        return Result.from_computation(
            lambda: build_fingerprint_index(pem_data),
            ErrorCode.LOCAL_EXPORT_ERROR,
            "Local certificate store output is unreadable",
        )


# ─────────────────────── Exporters ───────────────────────


class SecurityToolStoreExporter:
    """
    Export the macOS system root keychain as PEM via `/usr/bin/security`.

    Implements the LocalStoreExporter port. Fails with LOCAL_EXPORT_ERROR
    if the tool is missing or exits non-zero.
    """

    def __init__(
        self,
        keychain: str = SYSTEM_ROOTS_KEYCHAIN,
        executable: str = SECURITY_TOOL,
    ) -> None:
        self._keychain = keychain
        self._executable = executable

    def export(self) -> Result[bytes]:
        return Result.from_computation(
            self._run_export,
            ErrorCode.LOCAL_EXPORT_ERROR,
            f"Export of {self._keychain} failed",
        )

    def _run_export(self) -> bytes:
        completed = subprocess.run(
            [self._executable, "find-certificate", "-a", "-p", self._keychain],
            capture_output=True,
            check=True,
        )
        log.info("local_store.exported", keychain=self._keychain, size_bytes=len(completed.stdout))
        return completed.stdout


class PemFileStoreExporter:
    """
    Read a previously exported PEM bundle from disk.

    Implements the LocalStoreExporter port for build hosts without a keychain.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def export(self) -> Result[bytes]:
        return Result.from_computation(
            self._read,
            ErrorCode.LOCAL_EXPORT_ERROR,
            f"Failed to read local store from {self._path}",
        )

    def _read(self) -> bytes:
        data = self._path.read_bytes()
        log.info("local_store.exported", path=str(self._path), size_bytes=len(data))
        return data
