"""
Ports — Protocol-based interfaces for infrastructure adapters.

These define WHAT the generator needs (contracts) without specifying
HOW it's done (implementation). Following hexagonal architecture:

  Domain ← Ports (protocols) ← Adapters (implementations)

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.

Generation flow:
  1. TrustListFetcher   → vendor HTML document
  2. TrustListParser    → ordered TrustListEntry list
  3. LocalStoreExporter → PEM stream of the local root store
  4. CertificateIndexer → FingerprintIndex
  5. (domain) reconcile + allow-list filter → Bundle
  6. BundleRenderer     → generated source text
  7. BundleWriter       → artifact on disk
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from railway.result import Result

from roots_gen.domain.models import CertificateRecord, FingerprintIndex, TrustListEntry


@runtime_checkable
class TrustListFetcher(Protocol):
    """
    Port: retrieve the vendor's published trusted-roots document.

    Returns Result[str] with the document body, or a TRANSPORT_ERROR failure.
    """

    def fetch(self) -> Result[str]: ...


@runtime_checkable
class TrustListParser(Protocol):
    """
    Port: extract (name, fingerprint) entries from the trusted-roots document.

    Structural problems (missing anchor, missing column) and short rows are
    failures; there is no partial result.
    """

    def parse(self, document: str) -> Result[list[TrustListEntry]]: ...


@runtime_checkable
class LocalStoreExporter(Protocol):
    """Port: export the local platform root store as concatenated PEM blocks."""

    def export(self) -> Result[bytes]: ...


@runtime_checkable
class CertificateIndexer(Protocol):
    """
    Port: index a PEM stream by certificate fingerprint.

    Best-effort: undecodable blocks are skipped, never reported as failures.
    """

    def index(self, pem_data: bytes) -> Result[FingerprintIndex]: ...


@runtime_checkable
class BundleRenderer(Protocol):
    """Port: serialize the selected certificates into the generated artifact text."""

    def render(self, certificates: list[CertificateRecord]) -> Result[str]: ...


@runtime_checkable
class BundleWriter(Protocol):
    """
    Port: persist the generated artifact.

    The implementation must replace the target atomically: on failure the
    previous artifact (if any) is left untouched.
    """

    def write(self, source: str) -> Result[Path]: ...
