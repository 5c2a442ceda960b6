# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.
"""SPARQL queries of the publisher and the store the pipeline persists into.

Query strings are built here; transport lives in client.py and term
escaping in escape.py.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from besluit_publisher.logger import get_logger
from besluit_publisher.pipeline import PublishedResource
from besluit_publisher.profiles import ValueKind, value_kind_for
from besluit_publisher.result import Fail, FailureKind, Ok, Result
from besluit_publisher.sparql.client import Binding
from besluit_publisher.sparql.escape import (
    escape_datetime,
    escape_int,
    escape_object,
    escape_string,
    escape_uri,
)
from besluit_publisher.terms import Triple, expand_uri
from besluit_publisher.vocabulary import (
    FILE_BASE,
    MU_UUID,
    PENDING_STATUS,
    RDF_TYPE,
    RETRIES_PREDICATE,
    STATUS_PREDICATE,
)

log = get_logger(__name__)


class SparqlEndpoint(Protocol):
    def query(self, query: str) -> Result[list[Binding]]: ...

    def update(self, update: str) -> Result[None]: ...


def parse_bindings(bindings: list[Binding]) -> list[dict[str, str]]:
    """Flatten SPARQL JSON bindings to ``{var: value}`` rows."""
    return [{key: cell.get("value") for key, cell in row.items()} for row in bindings]


# ── Published resources ────────────────────────────────────────

def unprocessed_resources_query(graph: str, max_attempts: int) -> str:
    # resources that failed before go to the end of the queue
    return f"""
    PREFIX sign: <http://mu.semte.ch/vocabularies/ext/signing/>
    PREFIX nie: <http://www.semanticdesktop.org/ontologies/2007/01/19/nie#>
    PREFIX prov: <http://www.w3.org/ns/prov#>
    PREFIX dct: <http://purl.org/dc/terms/>
    SELECT DISTINCT ?graph ?resource ?rdfaSnippet ?filePath ?status ?created ?numberOfRetries {{
      VALUES ?graph {{ {escape_uri(graph)} }}
      GRAPH ?graph {{
        ?resource a sign:PublishedResource ; dct:created ?created .
        {{
          ?resource sign:text ?rdfaSnippet .
        }} UNION {{
          ?resource prov:generated ?file .
          ?filePath nie:dataSource ?file .
        }}
        OPTIONAL {{ ?resource {escape_uri(RETRIES_PREDICATE)} ?numberOfRetries . }}
        OPTIONAL {{ ?resource {escape_uri(STATUS_PREDICATE)} ?status . }}
        FILTER (
          (!BOUND(?status)) ||
          (
            (?status = <http://mu.semte.ch/vocabularies/ext/besluit-publicatie-publish-service/status/failed>) &&
            (?numberOfRetries < {escape_int(max_attempts)})
          ) ||
          (?status = {escape_uri(PENDING_STATUS)})
        )
      }}
    }} ORDER BY ASC(?numberOfRetries) ASC(?created)
    """


def filter_pending_timeout(
    resources: Sequence[PublishedResource],
    timeout_hours: float,
    now: datetime | None = None,
) -> list[PublishedResource]:
    """Drop pending resources that were picked up less than ``timeout_hours`` ago."""
    now = now or datetime.now(timezone.utc)
    kept: list[PublishedResource] = []
    for resource in resources:
        if resource.status != PENDING_STATUS:
            kept.append(resource)
            continue
        if not resource.created:
            continue
        try:
            created = datetime.fromisoformat(resource.created.replace("Z", "+00:00"))
        except ValueError:
            log.warning("Skipping %s, unreadable creation date: %s", resource.resource, resource.created)
            continue
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        if now - created >= timedelta(hours=timeout_hours):
            kept.append(resource)
    return kept


def get_unprocessed_published_resources(
    endpoint: SparqlEndpoint,
    graph: str,
    pending_timeout_hours: float,
    max_attempts: int,
) -> Result[list[PublishedResource]]:
    """Published resources still to do. File-backed snippets keep ``file_path`` set."""
    result = endpoint.query(unprocessed_resources_query(graph, max_attempts))
    if not result.ok:
        return result

    resources = [
        PublishedResource(
            graph=row["graph"],
            resource=row["resource"],
            rdfa_snippet=row.get("rdfaSnippet") or "",
            number_of_retries=int(row.get("numberOfRetries") or 0),
            status=row.get("status"),
            created=row.get("created"),
            file_path=row.get("filePath"),
        )
        for row in parse_bindings(result.data)
    ]
    return Ok(data=filter_pending_timeout(resources, pending_timeout_hours))


def update_status_query(resource: PublishedResource, status: str, attempts: int) -> str:
    subject = escape_uri(resource.resource)
    graph = escape_uri(resource.graph)
    return f"""
    DELETE {{
      GRAPH {graph} {{
        {subject} {escape_uri(STATUS_PREDICATE)} ?status .
        {subject} {escape_uri(RETRIES_PREDICATE)} ?retries .
      }}
    }}
    WHERE {{
      GRAPH {graph} {{
        OPTIONAL {{ {subject} {escape_uri(STATUS_PREDICATE)} ?status . }}
        OPTIONAL {{ {subject} {escape_uri(RETRIES_PREDICATE)} ?retries . }}
      }}
    }} ;
    INSERT DATA {{
      GRAPH {graph} {{
        {subject} {escape_uri(STATUS_PREDICATE)} {escape_uri(status)} .
        {subject} {escape_uri(RETRIES_PREDICATE)} {escape_int(attempts)} .
      }}
    }}
    """


def update_status(endpoint: SparqlEndpoint, resource: PublishedResource, status: str, attempts: int) -> Result[None]:
    return endpoint.update(update_status_query(resource, status, attempts))


# ── Files ──────────────────────────────────────────────────────

def file_metadata_query(
    graph: str,
    logical_uri: str,
    logical_uuid: str,
    physical_uri: str,
    physical_uuid: str,
    filename: str,
    size: int,
    created: datetime,
) -> str:
    stamp = escape_datetime(created)
    return f"""
    PREFIX mu: <http://mu.semte.ch/vocabularies/core/>
    PREFIX nie: <http://www.semanticdesktop.org/ontologies/2007/01/19/nie#>
    PREFIX nfo: <http://www.semanticdesktop.org/ontologies/2007/03/22/nfo#>
    PREFIX dct: <http://purl.org/dc/terms/>
    PREFIX dbpedia: <http://dbpedia.org/ontology/>
    INSERT DATA {{
      GRAPH {escape_uri(graph)} {{
        {escape_uri(logical_uri)} a nfo:FileDataObject ;
            nfo:fileName {escape_string(filename)} ;
            mu:uuid {escape_string(logical_uuid)} ;
            dct:format "text/html" ;
            dbpedia:fileExtension "html" ;
            nfo:fileSize {escape_int(size)} ;
            dct:created {stamp} ;
            dct:modified {stamp} .
        {escape_uri(physical_uri)} a nfo:FileDataObject ;
            nie:dataSource {escape_uri(logical_uri)} ;
            nfo:fileName {escape_string(filename)} ;
            mu:uuid {escape_string(physical_uuid)} ;
            nfo:fileSize {escape_int(size)} ;
            dbpedia:fileExtension "html" ;
            dct:created {stamp} ;
            dct:modified {stamp} .
      }}
    }}
    """


def write_file_metadata(
    endpoint: SparqlEndpoint,
    graph: str,
    physical_uri: str,
    physical_uuid: str,
    filename: str,
    size: int,
) -> Result[str]:
    """Register a written share file and its logical file; returns the logical file IRI."""
    logical_uuid = str(uuid.uuid4())
    logical_uri = f"{FILE_BASE}{logical_uuid}"
    query = file_metadata_query(
        graph,
        logical_uri,
        logical_uuid,
        physical_uri,
        physical_uuid,
        filename,
        size,
        datetime.now(timezone.utc),
    )
    result = endpoint.update(query)
    if not result.ok:
        return result
    return Ok(data=logical_uri)


# ── Persistence ────────────────────────────────────────────────

def escape_triple(triple: Triple) -> Result[str]:
    """One ``s p o .`` line, the object rendered per the predicate's value kind."""
    predicate = expand_uri(triple.predicate)
    kind = value_kind_for(predicate)
    if kind is None:
        return Fail(
            error=f"No value kind known for predicate {predicate}",
            context=triple,
            kind=FailureKind.DATA,
        )
    try:
        value = expand_uri(triple.object) if kind is ValueKind.URI else triple.object
        obj = escape_object(value, kind)
    except ValueError as exc:
        log.warning("failed to convert triple %s %s %r", triple.subject, predicate, triple.object)
        return Fail(error=f"Cannot render {triple.object!r} as {kind.value}: {exc}", context=triple, kind=FailureKind.DATA)
    return Ok(data=f"{escape_uri(triple.subject)} {escape_uri(predicate)} {obj} .")


def insert_data_query(graph: str, lines: Sequence[str]) -> str:
    body = "\n        ".join(lines)
    return f"""
    INSERT DATA {{
      GRAPH {escape_uri(graph)} {{
        {body}
      }}
    }}
    """


def uuid_query(graph: str, subject: str) -> str:
    return f"""
    SELECT DISTINCT ?uuid {{
      GRAPH {escape_uri(graph)} {{
        {escape_uri(subject)} {escape_uri(MU_UUID)} ?uuid .
      }}
    }}
    """


def permalink_query(graph: str, session: str) -> str:
    return f"""
    PREFIX skos: <http://www.w3.org/2004/02/skos/core#>
    PREFIX mandaat: <http://data.vlaanderen.be/ns/mandaat#>
    PREFIX besluit: <http://data.vlaanderen.be/ns/besluit#>
    PREFIX mu: <http://mu.semte.ch/vocabularies/core/>
    PREFIX foaf: <http://xmlns.com/foaf/0.1/>
    INSERT {{
      GRAPH {escape_uri(graph)} {{
        {escape_uri(session)} foaf:page ?redirectUrl .
      }}
    }}
    WHERE {{
      {escape_uri(session)} mu:uuid ?zittingUuid ;
          (besluit:isGehoudenDoor/mandaat:isTijdspecialisatieVan) ?administrativeUnit .
      ?administrativeUnit skos:prefLabel ?administrativeUnitFullName ;
          besluit:bestuurt ?bestuurseenheid .
      ?bestuurseenheid skos:prefLabel ?administrativeUnitName ;
          (besluit:classificatie/skos:prefLabel) ?administrativeUnitTypeName .
      BIND(
        CONCAT("/", ?administrativeUnitName, "/", ?administrativeUnitTypeName, "/zittingen/", ?zittingUuid)
        AS ?redirectUrl
      )
    }}
    """


@dataclass
class SparqlStore:
    """The pipeline's Store, backed by a SPARQL endpoint."""

    endpoint: SparqlEndpoint
    graph: str

    def belongs_to_type(self, resource: PublishedResource, type_uri: str) -> Result[bool]:
        query = f"""
        SELECT DISTINCT ?doc {{
          GRAPH {escape_uri(resource.graph)} {{
            {escape_uri(resource.resource)} {escape_uri(type_uri)} ?doc .
          }}
        }}
        """
        result = self.endpoint.query(query)
        if not result.ok:
            return result
        return Ok(data=len(result.data) > 0)

    def ensure_uuid(self, subject: str) -> Result[str]:
        """Existing mu:uuid of ``subject``, or a freshly inserted one."""
        existing = self.endpoint.query(uuid_query(self.graph, subject))
        if not existing.ok:
            return existing
        rows = parse_bindings(existing.data)
        if rows and rows[0].get("uuid"):
            return Ok(data=rows[0]["uuid"])

        new_uuid = str(uuid.uuid4())
        line = f"{escape_uri(subject)} {escape_uri(MU_UUID)} {escape_string(new_uuid)} ."
        inserted = self.endpoint.update(insert_data_query(self.graph, [line]))
        if not inserted.ok:
            return inserted
        return Ok(data=new_uuid)

    def persist(self, triples: Sequence[Triple]) -> Result[int]:
        """Insert triples subject by subject; typed subjects get a mu:uuid.

        Triples are expected to be expanded and checked against a profile.
        """
        if not triples:
            return Ok(data=0)

        lines_by_subject: dict[str, list[str]] = {}
        for triple in triples:
            line = escape_triple(triple)
            if not line.ok:
                return line
            lines_by_subject.setdefault(triple.subject, []).append(line.data)

        resources = {t.subject for t in triples if expand_uri(t.predicate) == RDF_TYPE}
        inserted = 0
        for subject, lines in lines_by_subject.items():
            result = self.endpoint.update(insert_data_query(self.graph, lines))
            if not result.ok:
                log.error("error while trying to persist data for %s: %s", subject, result.error)
                log.info("persisted %d of %d triples before failing", inserted, len(triples))
                return result
            inserted += len(lines)
            if subject in resources:
                ensured = self.ensure_uuid(subject)
                if not ensured.ok:
                    return ensured
        return Ok(data=inserted)

    def resolve_permalink(self, session_uri: str) -> Result[None]:
        return self.endpoint.update(permalink_query(self.graph, session_uri))
