"""LSP adapter module."""

from .language_server import HackatimeLanguageServer, create_server

__all__ = ["HackatimeLanguageServer", "create_server"]
