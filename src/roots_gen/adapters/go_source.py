"""
Go source renderer — embeds the selected certificates as a PEM string constant.

Adapter layer — implements the BundleRenderer port. The mobile runtime
consumes the artifact as part of `package mobile`:

    // Code generated by roots-gen --output roots_list.go; DO NOT EDIT.

    package mobile

    const systemRootsPEM = `
    -----BEGIN CERTIFICATE-----
    ...
    -----END CERTIFICATE-----
    `

The text is emitted already in gofmt layout. Output depends only on the
certificate sequence and the output name, so identical input is
byte-identical output.
"""

from __future__ import annotations

from collections.abc import Sequence

from asn1crypto import pem
from railway.result import Result

from roots_gen.domain.models import CertificateRecord

GENERATOR_NAME = "roots-gen"
GO_PACKAGE = "mobile"
GO_CONSTANT = "systemRootsPEM"


def certificate_pem(record: CertificateRecord) -> str:
    """PEM encoding of the record's DER bytes (64-column base64, LF line endings)."""
    return pem.armor("CERTIFICATE", record.certificate).decode("ascii")


def render_go_source(certificates: Sequence[CertificateRecord], output_name: str) -> str:
    pem_blocks = "".join(certificate_pem(record) for record in certificates)
    return (
        f"// Code generated by {GENERATOR_NAME} --output {output_name}; DO NOT EDIT.\n"
        f"\n"
        f"package {GO_PACKAGE}\n"
        f"\n"
        f"const {GO_CONSTANT} = `\n"
        f"{pem_blocks}`\n"
    )


class GoSourceRenderer:
    """
    Render the bundle as Go source.

    Implements the BundleRenderer port.
    """

    def __init__(self, output_name: str) -> None:
        self._output_name = output_name

    def render(self, certificates: list[CertificateRecord]) -> Result[str]:
        return Result.success(render_go_source(certificates, self._output_name))
