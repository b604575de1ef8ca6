"""pygls language server that feeds editor notifications into the pipeline."""

from __future__ import annotations

from typing import Optional

from loguru import logger
from lsprotocol import types
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..orchestrator import HeartbeatPipeline


class HackatimeLanguageServer(LanguageServer):
    """Language server carrying the shared heartbeat pipeline."""

    def __init__(self, pipeline: HeartbeatPipeline, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.pipeline = pipeline

    def saved_text(self, uri: str, text: Optional[str]) -> Optional[str]:
        """Text included in a save notification, else the synced document source."""
        if text is not None:
            return text
        try:
            return self.workspace.get_text_document(uri).source
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read {uri}: {e}")
            return None


def create_server(pipeline: HeartbeatPipeline) -> HackatimeLanguageServer:
    """Build the language server and register its notification handlers."""
    server = HackatimeLanguageServer(
        pipeline,
        name="hackatime-lsp",
        version=__version__,
        text_document_sync_kind=types.TextDocumentSyncKind.Incremental,
    )

    @server.feature(types.INITIALIZE)
    def initialize(ls: HackatimeLanguageServer, params: types.InitializeParams) -> None:
        ls.pipeline.initialize(params.root_uri, params.root_path)

    @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
    @server.thread()
    def did_change(ls: HackatimeLanguageServer, params: types.DidChangeTextDocumentParams) -> None:
        try:
            ls.pipeline.handle_change(params.text_document.uri, params.content_changes)
        except Exception as e:
            logger.error(f"Error handling didChange for {params.text_document.uri}: {e}")

    @server.feature(types.TEXT_DOCUMENT_DID_SAVE, types.SaveOptions(include_text=True))
    @server.thread()
    def did_save(ls: HackatimeLanguageServer, params: types.DidSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        try:
            ls.pipeline.handle_save(uri, ls.saved_text(uri, params.text))
        except Exception as e:
            logger.error(f"Error handling didSave for {uri}: {e}")

    @server.feature(types.SHUTDOWN)
    @server.thread()
    def shutdown(ls: HackatimeLanguageServer, params: None) -> None:
        logger.info("Shutdown requested")
        ls.pipeline.stop()

    return server
