"""Public surface for the controller's dependency protocols."""

from .interfaces_parts import CredentialProvider, StreamOpener, StreamResponse

__all__ = ["CredentialProvider", "StreamOpener", "StreamResponse"]
