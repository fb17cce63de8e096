"""
Selection — reconciliation and allow-list filtering.

Domain layer — pure transforms over in-memory values. The only side effect
is diagnostic logging.

  TrustListEntry[] + FingerprintIndex
    → reconcile()       → Reconciliation (matched + unmatched, trust-list order)
    → filter_allowed()  → CertificateRecord[] (allow-listed subsequence)
    → select_bundle()   → Bundle
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from roots_gen.domain.allow_list import ALLOWED_CA_SUBJECTS
from roots_gen.domain.models import (
    Bundle,
    CertificateRecord,
    FingerprintIndex,
    Reconciliation,
    TrustListEntry,
)

log = structlog.get_logger()


def reconcile(
    entries: Iterable[TrustListEntry],
    index: FingerprintIndex,
) -> Reconciliation:
    """
    Join trust-list entries against the local fingerprint index.

    Every entry lands in exactly one of `matched` or `unmatched`.
    A miss is expected (the local store may be stale) and only warns.
    """
    matched: list[CertificateRecord] = []
    unmatched: list[TrustListEntry] = []

    for entry in entries:
        record = index.get(entry.fingerprint)
        if record is None:
            log.warning(
                "trust_list.entry_unmatched",
                name=entry.name,
                fingerprint=entry.fingerprint,
            )
            unmatched.append(entry)
            continue
        matched.append(record)

    log.info("reconcile.complete", matched=len(matched), unmatched=len(unmatched))
    return Reconciliation(matched=matched, unmatched=unmatched)


def filter_allowed(
    certificates: Sequence[CertificateRecord],
    allowed: frozenset[str] = ALLOWED_CA_SUBJECTS,
) -> list[CertificateRecord]:
    """Keep certificates whose subject is exactly in `allowed`, preserving order."""
    selected: list[CertificateRecord] = []
    for record in certificates:
        is_allowed = record.subject in allowed
        log.info("bundle.candidate", subject=record.subject, allowed=is_allowed)
        if is_allowed:
            selected.append(record)
    return selected


def select_bundle(
    reconciliation: Reconciliation,
    allowed: frozenset[str] = ALLOWED_CA_SUBJECTS,
) -> Bundle:
    """Apply the allow-list to a reconciliation and package the outcome."""
    certificates = filter_allowed(reconciliation.matched, allowed)
    bundle = Bundle(
        certificates=certificates,
        unmatched=list(reconciliation.unmatched),
        excluded=len(reconciliation.matched) - len(certificates),
    )
    log.info(
        "bundle.selected",
        certificates=len(bundle.certificates),
        excluded=bundle.excluded,
        unmatched=len(bundle.unmatched),
    )
    return bundle
