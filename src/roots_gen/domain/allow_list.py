"""
Maintainer-curated allow-list of root CA subjects.

This is the final, manual trust decision: a certificate must be published
as trusted by the vendor, present in the local store, AND have its subject
listed here to be embedded. Subjects are RFC 4514 strings (most specific RDN
first, commas inside values escaped) and are compared by exact equality.
"""

from __future__ import annotations

ALLOWED_CA_SUBJECTS: frozenset[str] = frozenset(
    {
        "CN=AddTrust Class 1 CA Root,OU=AddTrust TTP Network,O=AddTrust AB,C=SE",
        "CN=AddTrust External CA Root,OU=AddTrust External TTP Network,O=AddTrust AB,C=SE",
        # Sectigo (COMODO)
        "CN=COMODO Certification Authority,O=COMODO CA Limited,L=Salford,ST=Greater Manchester,C=GB",
        "CN=COMODO ECC Certification Authority,O=COMODO CA Limited,L=Salford,ST=Greater Manchester,C=GB",
        "CN=COMODO RSA Certification Authority,O=COMODO CA Limited,L=Salford,ST=Greater Manchester,C=GB",
        # DigiCert
        "CN=DigiCert Global Root CA,OU=www.digicert.com,O=DigiCert Inc,C=US",
        "CN=DigiCert Global Root G2,OU=www.digicert.com,O=DigiCert Inc,C=US",
        "CN=DigiCert Global Root G3,OU=www.digicert.com,O=DigiCert Inc,C=US",
        "CN=DigiCert High Assurance EV Root CA,OU=www.digicert.com,O=DigiCert Inc,C=US",
        "CN=DigiCert Trusted Root G4,OU=www.digicert.com,O=DigiCert Inc,C=US",
        # Let's Encrypt and its cross-signer
        "CN=DST Root CA X3,O=Digital Signature Trust Co.",
        "CN=DST Root CA X4,O=Digital Signature Trust Co.",
        "CN=ISRG Root X1,O=Internet Security Research Group,C=US",
        # GlobalSign
        "CN=GlobalSign Root CA,OU=Root CA,O=GlobalSign nv-sa,C=BE",
        "CN=GlobalSign,OU=GlobalSign ECC Root CA - R4,O=GlobalSign",
        "CN=GlobalSign,OU=GlobalSign ECC Root CA - R5,O=GlobalSign",
        "CN=GlobalSign,OU=GlobalSign Root CA - R2,O=GlobalSign",
        "CN=GlobalSign,OU=GlobalSign Root CA - R3,O=GlobalSign",
        # GoDaddy
        r"OU=Go Daddy Class 2 Certification Authority,O=The Go Daddy Group\, Inc.,C=US",
        r"CN=Go Daddy Root Certificate Authority - G2,O=GoDaddy.com\, Inc.,L=Scottsdale,ST=Arizona,C=US",
    }
)
