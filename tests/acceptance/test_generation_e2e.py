"""
End-to-end BDD acceptance tests for the roots-gen pipeline.

Exercises the full pipeline with fake network and keychain collaborators:
fake fetch → real HTML parser → fake export → real PEM indexer → real
selection → real Go renderer → real atomic writer.

Each test follows Given/When/Then BDD structure in its docstring.

Markers: @pytest.mark.acceptance
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from cryptography import x509
from railway.assertions import ResultAssertions
from railway.failure import ErrorCode
from railway.result import Result

from roots_gen.adapters.go_source import GoSourceRenderer
from roots_gen.adapters.pem_store import PemFingerprintIndexer, build_fingerprint_index
from roots_gen.adapters.trust_list_parser import HtmlTrustListParser
from roots_gen.adapters.writer import AtomicFileBundleWriter
from roots_gen.domain.models import Bundle
from roots_gen.pipeline import run_pipeline
from tests.conftest import fingerprint_of, pem_of, trust_list_html

pytestmark = pytest.mark.acceptance


# ── Fake adapters (network and keychain) ─────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FakeTrustListFetcher:
    """Returns a fixed page — no real HTTP calls."""

    document: str

    def fetch(self) -> Result[str]:
        return Result.success(self.document)


@dataclass(frozen=True, slots=True)
class FakeStoreExporter:
    """Returns fixed PEM bytes — never runs the security tool."""

    pem_data: bytes

    def export(self) -> Result[bytes]:
        return Result.success(self.pem_data)


@dataclass
class RecordingStoreExporter:
    """Counts export() calls so tests can assert it was never reached."""

    calls: int = 0

    def export(self) -> Result[bytes]:
        self.calls += 1
        return Result.success(b"")


# ── Helpers ──────────────────────────────────────────────────────────────────


def _generate(
    output: Path,
    document: str,
    pem_data: bytes,
    allowed: frozenset[str] | None = None,
) -> Result[Bundle]:
    kwargs = {} if allowed is None else {"allowed": allowed}
    return run_pipeline(
        fetcher=FakeTrustListFetcher(document),
        parser=HtmlTrustListParser(),
        exporter=FakeStoreExporter(pem_data),
        indexer=PemFingerprintIndexer(),
        renderer=GoSourceRenderer(output_name=output.name),
        writer=AtomicFileBundleWriter(output),
        **kwargs,
    )


def _embedded_fingerprints(output: Path) -> list[str]:
    return list(build_fingerprint_index(output.read_bytes()))


# ── Acceptance Tests ─────────────────────────────────────────────────────────


class TestHappyPath:
    """Both trust-listed roots are in the store and on the allow-list."""

    def test_embeds_both_roots_in_trust_list_order(
        self,
        tmp_path: Path,
        isrg_root: x509.Certificate,
        digicert_g2: x509.Certificate,
    ) -> None:
        """
        GIVEN a trust list of [ISRG Root X1, DigiCert Global Root G2]
        AND a local store holding both (in the opposite order)
        WHEN the pipeline runs end-to-end
        THEN the artifact embeds ISRG X1 then DigiCert G2
        AND the bundle reports nothing unmatched or excluded.
        """
        output = tmp_path / "roots_list.go"
        document = trust_list_html(
            [
                ("ISRG Root X1", fingerprint_of(isrg_root)),
                ("DigiCert Global Root G2", fingerprint_of(digicert_g2)),
            ]
        )

        result = _generate(output, document, pem_of(digicert_g2, isrg_root))

        bundle = ResultAssertions.assert_success(result)
        assert len(bundle.certificates) == 2
        assert bundle.unmatched == []
        assert bundle.excluded == 0
        assert _embedded_fingerprints(output) == [
            fingerprint_of(isrg_root),
            fingerprint_of(digicert_g2),
        ]


class TestUnmatchedEntry:
    def test_entry_missing_from_store_is_reported_not_fatal(
        self, tmp_path: Path, isrg_root: x509.Certificate
    ) -> None:
        """
        GIVEN a trust list of [ISRG Root X1, a root the local store lacks]
        WHEN the pipeline runs
        THEN it succeeds with only ISRG X1 embedded
        AND the missing entry is reported as unmatched.
        """
        output = tmp_path / "roots_list.go"
        document = trust_list_html(
            [("ISRG Root X1", fingerprint_of(isrg_root)), ("Newer Root", "ab" * 32)]
        )

        bundle = ResultAssertions.assert_success(_generate(output, document, pem_of(isrg_root)))

        assert [entry.name for entry in bundle.unmatched] == ["Newer Root"]
        assert _embedded_fingerprints(output) == [fingerprint_of(isrg_root)]


class TestAllowListExclusion:
    def test_trusted_and_present_but_not_allow_listed_is_left_out(
        self,
        tmp_path: Path,
        isrg_root: x509.Certificate,
        unlisted_root: x509.Certificate,
    ) -> None:
        """
        GIVEN a root that is trust-listed and in the local store but not allow-listed
        WHEN the pipeline runs
        THEN it is not embedded and is counted as excluded.
        """
        output = tmp_path / "roots_list.go"
        document = trust_list_html(
            [
                ("Example Unlisted Root CA", fingerprint_of(unlisted_root)),
                ("ISRG Root X1", fingerprint_of(isrg_root)),
            ]
        )

        bundle = ResultAssertions.assert_success(
            _generate(output, document, pem_of(unlisted_root, isrg_root))
        )

        assert bundle.excluded == 1
        assert _embedded_fingerprints(output) == [fingerprint_of(isrg_root)]

    def test_escaped_comma_subject_matches_allow_list(
        self, tmp_path: Path, go_daddy_class2: x509.Certificate
    ) -> None:
        output = tmp_path / "roots_list.go"
        document = trust_list_html(
            [("Go Daddy Class 2 Certification Authority", fingerprint_of(go_daddy_class2))]
        )

        bundle = ResultAssertions.assert_success(
            _generate(output, document, pem_of(go_daddy_class2))
        )

        assert len(bundle.certificates) == 1


class TestDeterminism:
    def test_same_inputs_give_byte_identical_artifacts(
        self,
        tmp_path: Path,
        isrg_root: x509.Certificate,
        digicert_g2: x509.Certificate,
    ) -> None:
        """
        GIVEN identical trust list and local store contents
        WHEN the pipeline runs twice
        THEN both artifacts are byte-identical.
        """
        document = trust_list_html(
            [
                ("DigiCert Global Root G2", fingerprint_of(digicert_g2)),
                ("ISRG Root X1", fingerprint_of(isrg_root)),
            ]
        )
        pem_data = pem_of(isrg_root, digicert_g2)
        first, second = tmp_path / "a" / "roots_list.go", tmp_path / "b" / "roots_list.go"
        first.parent.mkdir()
        second.parent.mkdir()

        _generate(first, document, pem_data)
        _generate(second, document, pem_data)

        assert first.read_bytes() == second.read_bytes()


class TestMissingAnchor:
    def test_no_trusted_section_aborts_before_export_and_write(
        self, tmp_path: Path, isrg_root: x509.Certificate
    ) -> None:
        """
        GIVEN a page without <div id="trusted">
        WHEN the pipeline runs
        THEN it fails with STRUCTURAL_PARSE_ERROR
        AND the local store is never exported
        AND no artifact is written.
        """
        output = tmp_path / "roots_list.go"
        document = trust_list_html(
            [("ISRG Root X1", fingerprint_of(isrg_root))], section_id="archived"
        )
        exporter = RecordingStoreExporter()

        result = run_pipeline(
            fetcher=FakeTrustListFetcher(document),
            parser=HtmlTrustListParser(),
            exporter=exporter,
            indexer=PemFingerprintIndexer(),
            renderer=GoSourceRenderer(output_name=output.name),
            writer=AtomicFileBundleWriter(output),
        )

        ResultAssertions.assert_failure(result, ErrorCode.STRUCTURAL_PARSE_ERROR)
        assert exporter.calls == 0
        assert not output.exists()
