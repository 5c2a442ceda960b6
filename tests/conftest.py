from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENGINE_DIR = PROJECT_ROOT / "publish-engine"
if str(ENGINE_DIR) not in sys.path:
    sys.path.insert(0, str(ENGINE_DIR))

from besluit_publisher.pipeline import PublishedResource  # noqa: E402
from besluit_publisher.result import Fail, Ok  # noqa: E402
from besluit_publisher.terms import Triple, has_type  # noqa: E402


PREFIXES = (
    "besluit: http://data.vlaanderen.be/ns/besluit# "
    "prov: http://www.w3.org/ns/prov# "
    "dct: http://purl.org/dc/terms/ "
    "eli: http://data.europa.eu/eli/ontology#"
)

ZITTING_URI = "http://data.lblod.info/id/zittingen/z1"
ORGAAN_URI = "http://data.lblod.info/id/bestuursorganen/o1"
AP1 = "http://data.lblod.info/id/agendapunten/ap1"
AP2 = "http://data.lblod.info/id/agendapunten/ap2"
AP3 = "http://data.lblod.info/id/agendapunten/ap3"
BVAP1 = "http://data.lblod.info/id/behandelingen/bvap1"
BVAP2 = "http://data.lblod.info/id/behandelingen/bvap2"
BESLUIT1 = "http://data.lblod.info/id/besluiten/b1"
BESLUIT2 = "http://data.lblod.info/id/besluiten/b2"
PUBLISHED_URI = "http://data.lblod.info/id/published-resources/p1"
PUBLIC_GRAPH = "http://mu.semte.ch/graphs/public"


AGENDA_SNIPPET = f"""
<div prefix="{PREFIXES}">
  <div resource="{ZITTING_URI}" typeof="besluit:Zitting">
    <span property="besluit:isGehoudenDoor" resource="{ORGAAN_URI}"></span>
    <span property="prov:startedAtTime" datatype="xsd:dateTime" content="2024-03-01T19:00:00Z">1 maart</span>
    <ul>
      <li property="besluit:behandelt" resource="{AP3}" typeof="besluit:Agendapunt">
        <span property="dct:title">Punt 3</span>
        <span property="besluit:aangebrachtNa" resource="{AP2}"></span>
      </li>
      <li property="besluit:behandelt" resource="{AP1}" typeof="besluit:Agendapunt">
        <span property="dct:title">Punt 1</span>
      </li>
      <li property="besluit:behandelt" resource="{AP2}" typeof="besluit:Agendapunt">
        <span property="dct:title">Punt 2</span>
        <span property="besluit:aangebrachtNa" resource="{AP1}"></span>
      </li>
    </ul>
  </div>
</div>
"""

DECISION_SNIPPET = f"""
<div prefix="{PREFIXES}">
  <div resource="{ZITTING_URI}" typeof="besluit:Zitting">
    <span property="besluit:isGehoudenDoor" resource="{ORGAAN_URI}"></span>
    <div property="besluit:behandelt" resource="{AP1}" typeof="besluit:Agendapunt">
      <span property="dct:title">Punt 1</span>
    </div>
    <div resource="{BVAP1}" typeof="besluit:BehandelingVanAgendapunt">
      <span property="dct:subject" resource="{AP1}"></span>
      <div property="prov:generated" resource="{BESLUIT1}" typeof="besluit:Besluit">
        <span property="eli:title">Besluit 1</span>
      </div>
    </div>
    <div resource="{BVAP2}" typeof="besluit:BehandelingVanAgendapunt">
      <span property="besluit:gebeurtNa" resource="{BVAP1}"></span>
      <div property="prov:generated" resource="{BESLUIT2}" typeof="besluit:Besluit">
        <span property="eli:title">Besluit 2</span>
      </div>
    </div>
  </div>
</div>
"""


@dataclass
class FakeStore:
    """In-memory Store: open gates, persisted batches, scripted failures."""

    gates: set[str] = field(default_factory=set)
    fail_types: set[str] = field(default_factory=set)
    gate_error: bool = False
    permalink_error: bool = False
    batches: list[list[Triple]] = field(default_factory=list)
    permalinks: list[str] = field(default_factory=list)

    def belongs_to_type(self, resource, type_uri):
        if self.gate_error:
            return Fail(error="gate query failed")
        return Ok(data=type_uri in self.gates)

    def persist(self, triples):
        for rdf_type in self.fail_types:
            if any(has_type(t, rdf_type) for t in triples):
                return Fail(error=f"insert of {rdf_type} failed")
        self.batches.append(list(triples))
        return Ok(data=len(triples))

    def resolve_permalink(self, session_uri):
        if self.permalink_error:
            return Fail(error="permalink failed")
        self.permalinks.append(session_uri)
        return Ok(data=None)

    @property
    def persisted(self) -> list[Triple]:
        return [t for batch in self.batches for t in batch]


@dataclass
class FakeFileStore:
    documents: list[tuple[str, list[str]]] = field(default_factory=list)
    fail: bool = False

    def write_document(self, content, path_prefix):
        if self.fail:
            return Fail(error="share not writable")
        self.documents.append((content, list(path_prefix)))
        return Ok(data=f"http://lblod.data.gift/files/fake-{len(self.documents)}")


@dataclass
class FakeEndpoint:
    """SPARQL endpoint double: scripted query answers, recorded updates."""

    answers: list[list[dict]] = field(default_factory=list)
    queries: list[str] = field(default_factory=list)
    updates: list[str] = field(default_factory=list)
    fail_updates: bool = False
    fail_queries: bool = False
    fail_when: str | None = None

    def query(self, query):
        self.queries.append(query)
        if self.fail_queries:
            return Fail(error="SPARQL connection error: refused")
        return Ok(data=self.answers.pop(0) if self.answers else [])

    def update(self, update):
        self.updates.append(update)
        if self.fail_updates or (self.fail_when and self.fail_when in update):
            return Fail(error="SPARQL HTTP 500: Internal Server Error")
        return Ok(data=None)


def binding(**values: str) -> dict:
    return {key: {"type": "literal", "value": value} for key, value in values.items()}


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def files() -> FakeFileStore:
    return FakeFileStore()


@pytest.fixture
def endpoint() -> FakeEndpoint:
    return FakeEndpoint()


@pytest.fixture
def agenda_resource() -> PublishedResource:
    return PublishedResource(graph=PUBLIC_GRAPH, resource=PUBLISHED_URI, rdfa_snippet=AGENDA_SNIPPET)


@pytest.fixture
def decision_resource() -> PublishedResource:
    return PublishedResource(graph=PUBLIC_GRAPH, resource=PUBLISHED_URI, rdfa_snippet=DECISION_SNIPPET)
