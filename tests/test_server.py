"""Tests for the LSP handlers.

Handlers are called directly with lsprotocol params; the pygls server is
replaced by a MagicMock that carries a real buffer and config.
"""
import sys
import os
from unittest.mock import MagicMock
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    WORKSPACE_DID_CHANGE_WATCHED_FILES,
    WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS,
    ClientCapabilities,
    CompletionItemKind,
    CompletionParams,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    FileChangeType,
    FileEvent,
    GeneralClientCapabilities,
    InitializeParams,
    InitializedParams,
    MessageType,
    Position,
    PositionEncodingKind,
    Range,
    ServerCapabilities,
    TextDocumentContentChangeEvent_Type1,
    TextDocumentContentChangeEvent_Type2,
    TextDocumentIdentifier,
    TextDocumentItem,
    VersionedTextDocumentIdentifier,
    WorkspaceFolder,
    WorkspaceFoldersChangeEvent,
)

from bufwords import server
from bufwords.buffer import DocumentBuffer
from bufwords.config import Config

URI = "file:///tmp/notes.txt"
OTHER_URI = "file:///tmp/other.txt"


def make_ls(position_encoding="utf-16", **settings):
    ls = MagicMock()
    ls.config = Config(load=False)
    ls.config.update(settings)
    ls.server_capabilities = ServerCapabilities(position_encoding=PositionEncodingKind(position_encoding))
    ls.document = DocumentBuffer(position_encoding=position_encoding)
    return ls


def open_doc(ls, text, uri=URI):
    server.did_open(ls, DidOpenTextDocumentParams(
        text_document=TextDocumentItem(uri=uri, language_id="plaintext", version=1, text=text),
    ))


def range_change(start, end, text):
    return TextDocumentContentChangeEvent_Type1(
        range=Range(start=Position(line=start[0], character=start[1]),
                    end=Position(line=end[0], character=end[1])),
        text=text,
    )


def change_doc(ls, changes, uri=URI, version=2):
    server.did_change(ls, DidChangeTextDocumentParams(
        text_document=VersionedTextDocumentIdentifier(uri=uri, version=version),
        content_changes=changes,
    ))


def labels(ls, line, character, uri=URI):
    items = server.completions(ls, CompletionParams(
        text_document=TextDocumentIdentifier(uri=uri),
        position=Position(line=line, character=character),
    ))
    return [item.label for item in items]


def test_open_installs_text():
    ls = make_ls()
    open_doc(ls, "foo bar")
    assert ls.document.snapshot() == "foo bar"
    assert ls.document.uri == URI
    ls.show_message_log.assert_called_with("file opened!", MessageType.Info)


def test_range_change():
    ls = make_ls()
    open_doc(ls, "foo bar")
    change_doc(ls, [range_change((0, 4), (0, 7), "baz")])
    assert ls.document.snapshot() == "foo baz"
    assert ls.document.version == 2
    ls.show_message_log.assert_called_with("file changed!", MessageType.Info)


def test_mixed_changes_in_order():
    ls = make_ls()
    open_doc(ls, "foo")
    change_doc(ls, [
        TextDocumentContentChangeEvent_Type2(text="hello"),
        range_change((0, 5), (0, 5), " world"),
    ])
    assert ls.document.snapshot() == "hello world"


def test_completion_items():
    ls = make_ls()
    open_doc(ls, "foo bar foo")
    items = server.completions(ls, CompletionParams(
        text_document=TextDocumentIdentifier(uri=URI),
        position=Position(line=0, character=11),
    ))
    assert [item.label for item in items] == [" ", "bar"]
    assert all(item.kind == CompletionItemKind.Text for item in items)


def test_completion_skip_blank():
    ls = make_ls(skip_blank=True)
    open_doc(ls, "foo bar\nbaz")
    assert labels(ls, 1, 3) == ["bar", "foo"]


def test_completion_empty_buffer():
    ls = make_ls()
    open_doc(ls, "")
    assert labels(ls, 0, 0) == []


def test_completion_before_open():
    ls = make_ls()
    assert labels(ls, 0, 0) == []


def test_close_clears_buffer():
    ls = make_ls()
    open_doc(ls, "foo bar")
    server.did_close(ls, DidCloseTextDocumentParams(text_document=TextDocumentIdentifier(uri=URI)))
    assert not ls.document.is_open
    assert labels(ls, 0, 0) == []
    ls.show_message_log.assert_called_with("file closed!", MessageType.Info)


def test_other_documents_are_ignored():
    ls = make_ls()
    open_doc(ls, "foo bar")
    change_doc(ls, [range_change((0, 0), (0, 3), "zzz")], uri=OTHER_URI)
    server.did_close(ls, DidCloseTextDocumentParams(text_document=TextDocumentIdentifier(uri=OTHER_URI)))
    assert ls.document.snapshot() == "foo bar"
    assert ls.document.is_open
    assert labels(ls, 0, 0, uri=OTHER_URI) == []


def test_save_and_initialized_only_log():
    ls = make_ls()
    open_doc(ls, "foo")
    server.did_save(ls, DidSaveTextDocumentParams(text_document=TextDocumentIdentifier(uri=URI)))
    ls.show_message_log.assert_called_with("file saved!", MessageType.Info)
    server.initialized(ls, InitializedParams())
    ls.show_message_log.assert_called_with("initialized!", MessageType.Info)
    assert ls.document.snapshot() == "foo"


def test_configuration_change_updates_settings():
    ls = make_ls()
    open_doc(ls, "foo bar\nbaz")
    server.did_change_configuration(ls, DidChangeConfigurationParams(
        settings={"bufwords": {"skip_blank": True}},
    ))
    assert ls.config.skip_blank is True
    assert labels(ls, 1, 3) == ["bar", "foo"]
    ls.show_message_log.assert_called_with("configuration changed!", MessageType.Info)


def test_configuration_cannot_change_position_encoding():
    ls = make_ls()
    server.did_change_configuration(ls, DidChangeConfigurationParams(
        settings={"bufwords": {"position_encoding": "utf-32"}},
    ))
    assert ls.document.position_encoding == "utf-16"


def test_initialized_applies_advertised_encoding():
    ls = make_ls(position_encoding="utf-8")
    ls.document = DocumentBuffer(position_encoding="utf-16")
    server.initialized(ls, InitializedParams())
    assert ls.document.position_encoding == "utf-8"


def test_utf32_client_edits_in_code_points():
    ls = server.create_server(Config(load=False))
    ls.show_message_log = MagicMock()
    result = ls.lsp.lsp_initialize(InitializeParams(
        process_id=None,
        root_uri=None,
        capabilities=ClientCapabilities(
            general=GeneralClientCapabilities(position_encodings=[PositionEncodingKind.Utf32]),
        ),
    ))
    assert result.capabilities.position_encoding == PositionEncodingKind.Utf32
    server.initialized(ls, InitializedParams())
    assert ls.document.position_encoding == "utf-32"

    emoji = chr(0x1F600)
    open_doc(ls, emoji + "ab")
    change_doc(ls, [range_change((0, 1), (0, 2), "X")])
    assert ls.document.snapshot() == emoji + "Xb"


def test_initialized_before_initialize_keeps_default():
    ls = server.create_server(Config(load=False))
    ls.show_message_log = MagicMock()
    server.initialized(ls, InitializedParams())
    assert ls.document.position_encoding == "utf-16"


def test_workspace_folders_change_only_logs():
    ls = make_ls()
    open_doc(ls, "foo")
    server.did_change_workspace_folders(ls, DidChangeWorkspaceFoldersParams(
        event=WorkspaceFoldersChangeEvent(
            added=[WorkspaceFolder(uri="file:///tmp/new", name="new")],
            removed=[],
        ),
    ))
    ls.show_message_log.assert_called_with("workspace folders changed!", MessageType.Info)
    assert ls.document.snapshot() == "foo"


def test_watched_files_change_only_logs():
    ls = make_ls()
    open_doc(ls, "foo")
    server.did_change_watched_files(ls, DidChangeWatchedFilesParams(
        changes=[FileEvent(uri=URI, type=FileChangeType.Changed)],
    ))
    ls.show_message_log.assert_called_with("watched files have changed!", MessageType.Info)
    assert ls.document.snapshot() == "foo"


def test_create_server_registers_features():
    ls = server.create_server(Config(load=False))
    features = ls.lsp.fm.features
    for name in (TEXT_DOCUMENT_DID_OPEN, TEXT_DOCUMENT_DID_CHANGE, TEXT_DOCUMENT_COMPLETION):
        assert name in features
    assert ls.document.position_encoding == "utf-16"
    for name in (WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS, WORKSPACE_DID_CHANGE_WATCHED_FILES):
        assert name in features
