"""
Domain models — immutable data structures for certificates and trust-list entries.

These are pure value objects with no behavior beyond computed properties.
They carry the data recovered from the vendor trust list and the local
certificate store through reconciliation and selection.

All models are frozen dataclasses (immutable) following functional principles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class CertificateRecord:
    """
    A root certificate decoded from the local store.

    `certificate` holds the raw DER encoding, `subject` its RFC 4514
    distinguished name (most specific RDN first, e.g.
    "CN=ISRG Root X1,O=Internet Security Research Group,C=US") and
    `fingerprint` the lowercase hex SHA-256 digest of the DER bytes.
    """

    certificate: bytes = field(repr=False)
    subject: str
    fingerprint: str


FingerprintIndex: TypeAlias = dict[str, CertificateRecord]


@dataclass(frozen=True, slots=True)
class TrustListEntry:
    """
    One row of the vendor's trusted-roots table.

    Only `fingerprint` (lowercase hex, no separators) is used for matching;
    `name` is kept for diagnostics.
    """

    name: str
    fingerprint: str


@dataclass(frozen=True, slots=True)
class Reconciliation:
    """Trust-list entries joined against the local fingerprint index, in trust-list order."""

    matched: list[CertificateRecord] = field(default_factory=list)
    unmatched: list[TrustListEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.unmatched)


@dataclass(frozen=True, slots=True)
class Bundle:
    """
    The final selection to embed in the generated artifact.

    `certificates` is what gets emitted. `unmatched` and `excluded` are
    reporting only: entries missing from the local store, and the number
    of reconciled certificates dropped by the allow-list.
    """

    certificates: list[CertificateRecord] = field(default_factory=list)
    unmatched: list[TrustListEntry] = field(default_factory=list)
    excluded: int = 0
