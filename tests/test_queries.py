"""Tests for the SPARQL store, publishing queries and log entries."""

import logging
from datetime import datetime, timedelta, timezone

from conftest import PUBLIC_GRAPH, PUBLISHED_URI, ZITTING_URI, binding

from besluit_publisher.pipeline import PublishedResource
from besluit_publisher.result import FailureKind
from besluit_publisher.sparql.logs import save_log
from besluit_publisher.sparql.queries import (
    SparqlStore,
    escape_triple,
    filter_pending_timeout,
    get_unprocessed_published_resources,
    parse_bindings,
    update_status,
    write_file_metadata,
)
from besluit_publisher.terms import Triple
from besluit_publisher.vocabulary import (
    FAILED_STATUS,
    IS_GEHOUDEN_DOOR,
    MU_UUID,
    PENDING_STATUS,
    PUBLISHES_AGENDA,
    RDF_TYPE,
    RETRIES_PREDICATE,
    SCHEMA_POSITION,
    ZITTING,
)

NOW = datetime(2024, 3, 2, 12, 0, tzinfo=timezone.utc)


def _resource(**kwargs) -> PublishedResource:
    return PublishedResource(graph=PUBLIC_GRAPH, resource=PUBLISHED_URI, rdfa_snippet="<p></p>", **kwargs)


class TestBindings:

    def test_parse_bindings(self):
        rows = parse_bindings([binding(a="1", b="x")])
        assert rows == [{"a": "1", "b": "x"}]


class TestUnprocessedResources:

    def test_rows_become_resources(self, endpoint):
        endpoint.answers.append([
            binding(graph=PUBLIC_GRAPH, resource=PUBLISHED_URI, rdfaSnippet="<div></div>",
                    created="2024-03-01T10:00:00Z"),
            binding(graph=PUBLIC_GRAPH, resource=PUBLISHED_URI + "2", filePath="share://a.html",
                    created="2024-03-01T11:00:00Z", numberOfRetries="2", status=FAILED_STATUS),
        ])
        result = get_unprocessed_published_resources(endpoint, PUBLIC_GRAPH, 3, 10)
        assert result.ok
        first, second = result.data
        assert first.rdfa_snippet == "<div></div>"
        assert first.number_of_retries == 0
        assert second.file_path == "share://a.html"
        assert second.rdfa_snippet == ""
        assert second.number_of_retries == 2
        assert '"10"^^' in endpoint.queries[0]
        assert f"<{PUBLIC_GRAPH}>" in endpoint.queries[0]

    def test_query_failure_propagates(self, endpoint):
        endpoint.fail_queries = True
        result = get_unprocessed_published_resources(endpoint, PUBLIC_GRAPH, 3, 10)
        assert not result.ok
        assert result.kind is FailureKind.STORE

    def test_pending_timeout(self):
        fresh = _resource(status=PENDING_STATUS, created=(NOW - timedelta(hours=1)).isoformat())
        stale = _resource(status=PENDING_STATUS, created=(NOW - timedelta(hours=4)).isoformat())
        new = _resource(created=NOW.isoformat())
        assert filter_pending_timeout([fresh, stale, new], 3, now=NOW) == [stale, new]

    def test_unreadable_creation_date_skipped(self, caplog):
        broken = _resource(status=PENDING_STATUS, created="yesterday")
        stale = _resource(status=PENDING_STATUS, created=(NOW - timedelta(hours=4)).isoformat())
        with caplog.at_level(logging.WARNING, logger="besluit_publisher.sparql.queries"):
            assert filter_pending_timeout([broken, stale], 3, now=NOW) == [stale]
        assert "yesterday" in caplog.text


class TestStatus:

    def test_update_status_replaces_both_values(self, endpoint):
        assert update_status(endpoint, _resource(), PENDING_STATUS, 2).ok
        [query] = endpoint.updates
        assert "DELETE" in query and "INSERT DATA" in query
        assert f"<{PENDING_STATUS}>" in query
        assert f"<{RETRIES_PREDICATE}>" in query
        assert '"2"^^' in query


class TestEscapeTriple:

    def test_uri_object_expanded(self):
        line = escape_triple(Triple(ZITTING_URI, "a", "besluit:Zitting"))
        assert line.data == f"<{ZITTING_URI}> <{RDF_TYPE}> <{ZITTING}> ."

    def test_unknown_predicate_is_data_failure(self):
        result = escape_triple(Triple(ZITTING_URI, "http://e/unknown", "x"))
        assert not result.ok
        assert result.kind is FailureKind.DATA

    def test_bad_value_is_data_failure(self):
        result = escape_triple(Triple(ZITTING_URI, SCHEMA_POSITION, "first"))
        assert not result.ok
        assert result.kind is FailureKind.DATA


class TestSparqlStore:

    def test_belongs_to_type(self, endpoint):
        store = SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH)
        endpoint.answers.extend([[binding(doc="http://e/d")], []])
        assert store.belongs_to_type(_resource(), PUBLISHES_AGENDA).data is True
        assert store.belongs_to_type(_resource(), PUBLISHES_AGENDA).data is False
        assert f"<{PUBLISHES_AGENDA}>" in endpoint.queries[0]

    def test_persist_one_insert_per_subject_and_uuid(self, endpoint):
        store = SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH)
        triples = [
            Triple(ZITTING_URI, RDF_TYPE, ZITTING),
            Triple(ZITTING_URI, IS_GEHOUDEN_DOOR, "http://e/o"),
            Triple("http://e/o", IS_GEHOUDEN_DOOR, "http://e/x"),
        ]
        result = store.persist(triples)
        assert result.ok
        assert result.data == 3
        # session insert, uuid insert for the typed session, then the other subject
        assert len(endpoint.updates) == 3
        assert f"<{MU_UUID}>" in endpoint.updates[1]
        assert len(endpoint.queries) == 1

    def test_existing_uuid_reused(self, endpoint):
        store = SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH)
        endpoint.answers.append([binding(uuid="abc")])
        assert store.ensure_uuid(ZITTING_URI).data == "abc"
        assert endpoint.updates == []

    def test_persist_rejects_unknown_predicate_before_writing(self, endpoint):
        store = SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH)
        result = store.persist([
            Triple(ZITTING_URI, RDF_TYPE, ZITTING),
            Triple(ZITTING_URI, "http://e/unknown", "x"),
        ])
        assert not result.ok
        assert result.kind is FailureKind.DATA
        assert endpoint.updates == []

    def test_persist_store_failure(self, endpoint):
        endpoint.fail_updates = True
        store = SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH)
        result = store.persist([Triple(ZITTING_URI, RDF_TYPE, ZITTING)])
        assert not result.ok
        assert result.retryable

    def test_persist_nothing(self, endpoint):
        assert SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH).persist([]).data == 0
        assert endpoint.updates == []

    def test_resolve_permalink(self, endpoint):
        store = SparqlStore(endpoint=endpoint, graph=PUBLIC_GRAPH)
        assert store.resolve_permalink(ZITTING_URI).ok
        assert "foaf:page" in endpoint.updates[0]
        assert f"<{ZITTING_URI}>" in endpoint.updates[0]


class TestMetadataAndLogs:

    def test_write_file_metadata(self, endpoint):
        result = write_file_metadata(endpoint, PUBLIC_GRAPH, "share://notulen/f.html", "f", "f.html", 42)
        assert result.ok
        assert result.data.startswith("http://lblod.data.gift/files/")
        [query] = endpoint.updates
        assert "<share://notulen/f.html>" in query
        assert f"<{result.data}>" in query
        assert '"42"^^' in query

    def test_save_log(self, endpoint):
        assert save_log(endpoint, "http://mu.semte.ch/graphs/logs", 'broke "badly"', {"resource": "r"}).ok
        [query] = endpoint.updates
        assert "rlog:Entry" in query
        assert '\\"badly\\"' in query
        assert "<http://mu.semte.ch/graphs/logs>" in query
