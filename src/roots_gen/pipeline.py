"""
Pipeline — the ROP pipeline orchestrating one generation run.

Domain layer — no I/O of its own. All I/O is injected via ports
(Protocol interfaces).

The pipeline connects stages via flat_map, forming a railway:

  fetch()
    → parse(document)
      → export()                      (only after the trust list parsed)
        → index(pem_data)
          → reconcile + select_bundle (pure)
            → render(certificates)
              → write(source)          (only after everything above succeeded)

Each stage returns Result[T]. Failures short-circuit automatically
through the ROP railway — no try/except needed.
"""

from __future__ import annotations

from railway.result import Result

from roots_gen.domain.allow_list import ALLOWED_CA_SUBJECTS
from roots_gen.domain.models import Bundle, TrustListEntry
from roots_gen.domain.ports import (
    BundleRenderer,
    BundleWriter,
    CertificateIndexer,
    LocalStoreExporter,
    TrustListFetcher,
    TrustListParser,
)
from roots_gen.domain.selection import reconcile, select_bundle


def _select_from_local_store(
    entries: list[TrustListEntry],
    exporter: LocalStoreExporter,
    indexer: CertificateIndexer,
    allowed: frozenset[str],
) -> Result[Bundle]:
    return (
        exporter.export()
        .flat_map(indexer.index)
        .map(lambda index: reconcile(entries, index))
        .map(lambda reconciliation: select_bundle(reconciliation, allowed))
    )


def select_certificates(
    fetcher: TrustListFetcher,
    parser: TrustListParser,
    exporter: LocalStoreExporter,
    indexer: CertificateIndexer,
    allowed: frozenset[str] = ALLOWED_CA_SUBJECTS,
) -> Result[Bundle]:
    """
    Fetch the trust list, reconcile it with the local store and apply the allow-list.

    The local store is only exported once the trust list parsed cleanly.
    """
    return (
        fetcher.fetch()
        .flat_map(parser.parse)
        .flat_map(lambda entries: _select_from_local_store(entries, exporter, indexer, allowed))
    )


def run_pipeline(
    fetcher: TrustListFetcher,
    parser: TrustListParser,
    exporter: LocalStoreExporter,
    indexer: CertificateIndexer,
    renderer: BundleRenderer,
    writer: BundleWriter,
    allowed: frozenset[str] = ALLOWED_CA_SUBJECTS,
) -> Result[Bundle]:
    """
    Execute a full generation run.

    Flow:
      1. Download and parse the vendor trust list
      2. Export and index the local root store
      3. Reconcile by fingerprint, filter by subject allow-list
      4. Render the generated source
      5. Atomically write the artifact

    Returns Result[Bundle] describing what was written,
    or Result.failure with the error from the first failing stage
    (in which case nothing was written).
    """
    return select_certificates(fetcher, parser, exporter, indexer, allowed).flat_map(
        lambda bundle: renderer.render(bundle.certificates)
        .flat_map(writer.write)
        .map(lambda _path: bundle)
    )
