"""
roots_gen — trusted root CA bundle generator for the mobile runtime.

Reconciles Apple's published list of trusted root certificates with the
certificates present in the local macOS system root keychain, keeps the
intersection restricted to a curated subject allow-list, and writes the
result as generated Go source embedding the PEM bundle.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"
