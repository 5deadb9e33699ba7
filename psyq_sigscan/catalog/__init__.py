"""Signature catalog: record parsing and catalog access."""

from .signature import CompiledSignature, Label, SignatureRecord, compile_signature
from .github_catalog import GitHubSignatureCatalog, LocalSignatureCatalog, SignatureSource

__all__ = [
    "CompiledSignature",
    "Label",
    "SignatureRecord",
    "compile_signature",
    "GitHubSignatureCatalog",
    "LocalSignatureCatalog",
    "SignatureSource",
]
