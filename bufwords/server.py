"""Language server — LSP lifecycle notifications and completion over the document buffer."""
import logging

from lsprotocol.types import (
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    WORKSPACE_DID_CHANGE_WATCHED_FILES,
    WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS,
    CompletionItem,
    CompletionItemKind,
    CompletionOptions,
    CompletionParams,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    InitializedParams,
    MessageType,
    TextDocumentSyncKind,
)
from pygls.server import LanguageServer

from bufwords import __version__
from bufwords.buffer import DocumentBuffer
from bufwords.completion import is_blank
from bufwords.config import Config

logger = logging.getLogger(__name__)

# Column unit every LSP client understands; used until initialize settles on one
DEFAULT_POSITION_ENCODING = "utf-16"


class BufwordsLanguageServer(LanguageServer):
    """Language server holding one document buffer and the active configuration."""

    def __init__(self, config: Config | None = None, **kwargs):
        super().__init__(
            "bufwords",
            __version__,
            text_document_sync_kind=TextDocumentSyncKind.Incremental,
            **kwargs,
        )
        self.config = config if config is not None else Config()
        self.document = DocumentBuffer(position_encoding=DEFAULT_POSITION_ENCODING)


def _is_current(ls, uri: str) -> bool:
    """Only one document is tracked; notifications for any other are ignored."""
    current = ls.document.uri
    if current is None or current == uri:
        return True
    logger.debug("Ignoring %s: buffer holds %s", uri, current)
    return False


def _change_range(change):
    # Full-document change events carry no range
    change_range = getattr(change, "range", None)
    if change_range is None:
        return None
    start, end = change_range.start, change_range.end
    return (start.line, start.character), (end.line, end.character)


def _negotiated_encoding(ls) -> str:
    """Column unit advertised to the client in the initialize response."""
    # Unset until the initialize request has been handled
    capabilities = getattr(ls, "server_capabilities", None)
    kind = capabilities.position_encoding if capabilities is not None else None
    if kind is None:
        return DEFAULT_POSITION_ENCODING
    return getattr(kind, "value", kind)


def initialized(ls, params: InitializedParams):
    encoding = _negotiated_encoding(ls)
    ls.document.configure(position_encoding=encoding)
    logger.info("Client initialized (position encoding %s)", encoding)
    ls.show_message_log("initialized!", MessageType.Info)


def did_open(ls, params: DidOpenTextDocumentParams):
    doc = params.text_document
    ls.document.replace_all(doc.text, uri=doc.uri, version=doc.version)
    logger.info("Opened %s (%d chars)", doc.uri, len(doc.text))
    ls.show_message_log("file opened!", MessageType.Info)


def did_change(ls, params: DidChangeTextDocumentParams):
    doc = params.text_document
    if not _is_current(ls, doc.uri):
        return
    changes = [(_change_range(change), change.text) for change in params.content_changes]
    ls.document.apply_changes(changes, version=doc.version)
    logger.debug("Applied %d change(s) to %s, version %s", len(changes), doc.uri, doc.version)
    ls.show_message_log("file changed!", MessageType.Info)


def did_save(ls, params: DidSaveTextDocumentParams):
    logger.debug("Saved %s", params.text_document.uri)
    ls.show_message_log("file saved!", MessageType.Info)


def did_close(ls, params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    if not _is_current(ls, uri):
        return
    ls.document.close()
    logger.info("Closed %s", uri)
    ls.show_message_log("file closed!", MessageType.Info)


def did_change_configuration(ls, params: DidChangeConfigurationParams):
    ls.config.apply_settings(params.settings)
    logger.info("Configuration changed: skip_blank=%s", ls.config.skip_blank)
    ls.show_message_log("configuration changed!", MessageType.Info)


def did_change_workspace_folders(ls, params: DidChangeWorkspaceFoldersParams):
    event = params.event
    logger.debug("Workspace folders: +%d -%d", len(event.added), len(event.removed))
    ls.show_message_log("workspace folders changed!", MessageType.Info)


def did_change_watched_files(ls, params: DidChangeWatchedFilesParams):
    logger.debug("%d watched file(s) changed", len(params.changes))
    ls.show_message_log("watched files have changed!", MessageType.Info)


def completions(ls, params: CompletionParams) -> list[CompletionItem]:
    """Every distinct token in the buffer except the one being typed."""
    if not _is_current(ls, params.text_document.uri):
        return []
    position = params.position
    words = ls.document.complete(position.line, position.character)
    if ls.config.skip_blank:
        words = {w for w in words if not is_blank(w)}
    logger.debug("%d candidate(s) at %d:%d", len(words), position.line, position.character)
    return [CompletionItem(label=word, kind=CompletionItemKind.Text) for word in sorted(words)]


def create_server(config: Config | None = None) -> BufwordsLanguageServer:
    """Build a server with all features registered."""
    server = BufwordsLanguageServer(config)
    server.feature(INITIALIZED)(initialized)
    server.feature(TEXT_DOCUMENT_DID_OPEN)(did_open)
    server.feature(TEXT_DOCUMENT_DID_CHANGE)(did_change)
    server.feature(TEXT_DOCUMENT_DID_SAVE)(did_save)
    server.feature(TEXT_DOCUMENT_DID_CLOSE)(did_close)
    server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)(did_change_configuration)
    server.feature(WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)(did_change_workspace_folders)
    server.feature(WORKSPACE_DID_CHANGE_WATCHED_FILES)(did_change_watched_files)
    server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(resolve_provider=False),
    )(completions)
    return server
