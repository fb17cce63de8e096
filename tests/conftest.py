"""
Shared test fixtures and helpers for the roots-gen test suite.

Certificates are generated at test time with cryptography (self-signed,
EC P-256) so subjects can be chosen to hit or miss the allow-list.
Trust-list pages are rendered in the shape of the vendor's support article:
a <div id="trusted"> holding a table whose first row carries <th> labels and
whose fingerprints are upper-case byte pairs broken with <br> and &nbsp;.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator, Sequence
from datetime import UTC, datetime, timedelta

import pytest
import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

DEFAULT_COLUMNS = (
    "Certificate name",
    "Issued by",
    "Type",
    "Key size",
    "Sig alg",
    "Serial number",
    "Expires",
    "EV policy",
    "Fingerprint (SHA-256)",
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test (or the CLI) applied."""
    yield
    structlog.reset_defaults()


# ─────────────────────── Certificates ───────────────────────


def make_certificate(
    common_name: str | None = None,
    *,
    organization: str | None = None,
    org_unit: str | None = None,
    locality: str | None = None,
    state: str | None = None,
    country: str | None = None,
) -> x509.Certificate:
    """Create a self-signed root certificate with the given subject attributes."""
    attributes = [
        (NameOID.COUNTRY_NAME, country),
        (NameOID.STATE_OR_PROVINCE_NAME, state),
        (NameOID.LOCALITY_NAME, locality),
        (NameOID.ORGANIZATION_NAME, organization),
        (NameOID.ORGANIZATIONAL_UNIT_NAME, org_unit),
        (NameOID.COMMON_NAME, common_name),
    ]
    name = x509.Name([x509.NameAttribute(oid, value) for oid, value in attributes if value])
    key = ec.generate_private_key(ec.SECP256R1())
    now = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=3650))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )


def der_of(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.DER)


def pem_of(*certs: x509.Certificate) -> bytes:
    """Concatenated PEM encoding, as the keychain export tool emits it."""
    return b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in certs)


def fingerprint_of(cert: x509.Certificate) -> str:
    """Lowercase hex SHA-256 of the DER encoding."""
    return hashlib.sha256(der_of(cert)).hexdigest()


@pytest.fixture(scope="session")
def isrg_root() -> x509.Certificate:
    """Subject: CN=ISRG Root X1,O=Internet Security Research Group,C=US (allow-listed)."""
    return make_certificate(
        "ISRG Root X1", organization="Internet Security Research Group", country="US"
    )


@pytest.fixture(scope="session")
def digicert_g2() -> x509.Certificate:
    """Subject: CN=DigiCert Global Root G2,OU=www.digicert.com,O=DigiCert Inc,C=US (allow-listed)."""
    return make_certificate(
        "DigiCert Global Root G2",
        organization="DigiCert Inc",
        org_unit="www.digicert.com",
        country="US",
    )


@pytest.fixture(scope="session")
def go_daddy_class2() -> x509.Certificate:
    """Subject with an escaped comma and no CN (allow-listed)."""
    return make_certificate(
        organization="The Go Daddy Group, Inc.",
        org_unit="Go Daddy Class 2 Certification Authority",
        country="US",
    )


@pytest.fixture(scope="session")
def unlisted_root() -> x509.Certificate:
    """A root whose subject is not on the allow-list."""
    return make_certificate("Example Unlisted Root CA", organization="Example Trust", country="NL")


# ─────────────────────── Trust-list HTML ───────────────────────


def vendor_fingerprint(fingerprint: str) -> str:
    """
    Render a hex fingerprint the way the vendor page does.

    Upper-case byte pairs separated by spaces, wrapped with <br> halfway
    and a stray &nbsp; before the break.
    """
    pairs = [fingerprint[i : i + 2].upper() for i in range(0, len(fingerprint), 2)]
    half = len(pairs) // 2
    return " ".join(pairs[:half]) + "&nbsp;<br>\n" + " ".join(pairs[half:])


def trust_list_html(
    entries: Sequence[tuple[str, str]],
    columns: Sequence[str] = DEFAULT_COLUMNS,
    section_id: str = "trusted",
) -> str:
    """
    Build a trusted-roots page for (name, lowercase hex fingerprint) entries.

    Cells for columns other than the name and fingerprint are filler.
    """
    header = "".join(f"<th>{label}</th>" for label in columns)
    rows = []
    for name, fingerprint in entries:
        cells = []
        for label in columns:
            if label == "Certificate name":
                cells.append(f"{name}&nbsp;")
            elif label == "Fingerprint (SHA-256)":
                cells.append(vendor_fingerprint(fingerprint))
            else:
                cells.append(f"{label} value")
        rows.append("<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>")
    body = "\n".join(rows)
    return (
        "<!DOCTYPE html><html><head><title>Trusted root certificates</title></head><body>"
        '<div id="blocked"><table><tr><th>Certificate name</th></tr>'
        "<tr><td>Blocked Root</td></tr></table></div>"
        f'<div id="{section_id}"><h2>Trusted certificates</h2>'
        f"<table><tbody>\n<tr>{header}</tr>\n{body}\n</tbody></table></div>"
        "</body></html>"
    )
