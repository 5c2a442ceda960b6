"""Tests for share drive access."""

from pathlib import Path

from conftest import PUBLIC_GRAPH

from besluit_publisher.files import ShareFileStore, persist_content_to_file, read_snippet, share_uri
from besluit_publisher.result import FailureKind


class TestReadSnippet:

    def test_reads_share_reference(self, tmp_path: Path):
        (tmp_path / "published").mkdir()
        (tmp_path / "published" / "a.html").write_text("<div>hi</div>", encoding="utf-8")
        result = read_snippet("share://published/a.html", tmp_path)
        assert result.ok
        assert result.data == "<div>hi</div>"

    def test_missing_file_is_retryable(self, tmp_path: Path):
        result = read_snippet("share://nope.html", tmp_path)
        assert not result.ok
        assert result.kind is FailureKind.STORE

    def test_not_a_share_reference(self, tmp_path: Path):
        result = read_snippet("http://e/a.html", tmp_path)
        assert not result.ok
        assert result.kind is FailureKind.DATA


class TestPersistContent:

    def test_writes_uuid_named_html(self, tmp_path: Path):
        result = persist_content_to_file("<p>x</p>", tmp_path, ["enriched-notulen"])
        assert result.ok
        stored = result.data
        assert stored.path.parent == tmp_path / "enriched-notulen"
        assert stored.filename == f"{stored.uuid}.html"
        assert stored.path.read_text(encoding="utf-8") == "<p>x</p>"
        assert stored.size == len("<p>x</p>")
        assert share_uri(stored.path, tmp_path) == f"share://enriched-notulen/{stored.filename}"

    def test_no_prefix(self, tmp_path: Path):
        result = persist_content_to_file("x", tmp_path)
        assert result.data.path.parent == tmp_path


class TestShareFileStore:

    def test_file_and_metadata(self, tmp_path: Path, endpoint):
        store = ShareFileStore(endpoint=endpoint, graph=PUBLIC_GRAPH, share_dir=tmp_path)
        result = store.write_document("<p>notulen</p>", ["enriched-notulen"])
        assert result.ok
        assert result.data.startswith("http://lblod.data.gift/files/")
        [written] = list((tmp_path / "enriched-notulen").iterdir())
        assert f"<share://enriched-notulen/{written.name}>" in endpoint.updates[0]

    def test_metadata_failure(self, tmp_path: Path, endpoint):
        endpoint.fail_updates = True
        store = ShareFileStore(endpoint=endpoint, graph=PUBLIC_GRAPH, share_dir=tmp_path)
        assert not store.write_document("<p></p>", ["enriched-notulen"]).ok
