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

"""Pipeline orchestrator: one published resource, start to finish.

  1. Flatten: RDFa snippet → deduplicated triples → preprocess
  2. Session: extract the zitting, link to origin, persist (always first)
  3. Gated branches, each only when the resource publishes that kind:
       publishesAgenda          → agenda + ordered agendapunten
       publishesBehandeling     → uittreksel + bvaps + besluiten
       publishesBesluitenlijst  → besluitenlijst + ordered bvaps + besluiten + stemmingen
       publishesNotulen         → notulen (stable uri) + enriched document file
  4. Permalink of the session

Assumes every snippet contains exactly one zitting and that every extracted
resource hangs off it. Agenda, uittreksel and besluitenlijst extend the
application profile; they make managing extracted data easier.

A failing gated branch does not stop the others unless ``fail_fast`` is
set. The session branch is a prerequisite: when it fails, the run stops.
"""

from __future__ import annotations

import hashlib
import hmac
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from besluit_publisher import profiles
from besluit_publisher.annotate import annotate_decisions, apply_annotations, utc_today
from besluit_publisher.linking import (
    MissingSessionError,
    find_session,
    link_to_container,
    link_to_origin,
    link_to_parent,
)
from besluit_publisher.logger import PipelineSummary, get_logger
from besluit_publisher.ordering import order_chain
from besluit_publisher.rdfa import DEFAULT_BASE_IRI, flatten, parse_document
from besluit_publisher.result import Fail, FailureKind, Ok, Result
from besluit_publisher.terms import Triple, dedupe_triples, expand_uri, has_type, is_uri
from besluit_publisher.vocabulary import (
    AANGEBRACHT_NA,
    AGENDA,
    AGENDA_BASE,
    AGENDAPUNT,
    BEHANDELING_VAN_AGENDAPUNT,
    BEHANDELT,
    BESLUITENLIJST,
    BESLUITENLIJST_BASE,
    ELI_DATE_PUBLICATION,
    EXT_AGENDA,
    EXT_AGENDA_AGENDAPUNT,
    EXT_BESLUITENLIJST,
    EXT_BESLUITENLIJST_BESLUIT,
    EXT_UITTREKSEL,
    EXT_UITTREKSEL_BVAP,
    GEBEURT_NA,
    HEEFT_NOTULEN,
    NOTULEN,
    NOTULEN_BASE,
    PREDICATE_REMAP,
    PROV_GENERATED,
    PROV_VALUE,
    PUBLISHES_AGENDA,
    PUBLISHES_BEHANDELING,
    PUBLISHES_BESLUITENLIJST,
    PUBLISHES_NOTULEN,
    RDF_TYPE,
    RDFS_RESOURCE,
    UITTREKSEL,
    UITTREKSEL_BASE,
    XSD_DATE,
    ZITTING,
)

log = get_logger(__name__)


# ── Collaborators ──────────────────────────────────────────────

@dataclass
class PublishedResource:
    """A sign:PublishedResource waiting to be published."""

    graph: str
    resource: str
    rdfa_snippet: str
    number_of_retries: int = 0
    status: str | None = None
    created: str | None = None
    file_path: str | None = None


class Store(Protocol):
    def belongs_to_type(self, resource: PublishedResource, type_uri: str) -> Result[bool]: ...

    def persist(self, triples: Sequence[Triple]) -> Result[int]: ...

    def resolve_permalink(self, session_uri: str) -> Result[None]: ...


class FileStore(Protocol):
    def write_document(self, content: str, path_prefix: Sequence[str]) -> Result[str]: ...


# ── Run state ──────────────────────────────────────────────────

@dataclass(frozen=True)
class PipelineContext:
    """Everything a branch may read. Shared by all branches of one run."""

    resource: PublishedResource
    triples: list[Triple]
    session: str
    today: str
    files: FileStore
    base_iri: str = DEFAULT_BASE_IRI
    minutes_dir: str = "enriched-notulen"


@dataclass
class RunReport:
    resource: str
    session: str
    branches: dict[str, str] = field(default_factory=dict)
    persisted: int = 0
    summary: PipelineSummary = field(default_factory=PipelineSummary)


@dataclass(frozen=True)
class Branch:
    name: str
    gate: str | None
    build: Callable[[PipelineContext], Result[list[Triple]]]


# ── Pre/post processing ────────────────────────────────────────

def preprocess(triples: Sequence[Triple]) -> list[Triple]:
    """Remap legacy predicates and drop empty-object artifacts."""
    remapped = [
        Triple(t.subject, PREDICATE_REMAP[t.predicate], t.object, t.datatype)
        if t.predicate in PREDICATE_REMAP else t
        for t in triples
    ]
    # Blank rdfs:Resource objects come from sloppy markup, e.g. resource=" ".
    # Empty literals are real values and stay.
    return [
        t for t in remapped
        if t.object.strip() or not t.datatype or expand_uri(t.datatype) != RDFS_RESOURCE
    ]


def _uri_valued(triples: Sequence[Triple], predicate: str) -> list[Triple]:
    """Drop ``predicate`` triples whose object is not an IRI (ordering needs IRIs)."""
    return [t for t in triples if expand_uri(t.predicate) != predicate or is_uri(t.object)]


def minutes_uri(session: str) -> str:
    """Stable notulen IRI: republishing a session's minutes reuses the same resource."""
    digest = hmac.new(session.encode("utf-8"), b"", hashlib.sha256).hexdigest()
    return f"{NOTULEN_BASE}{digest}"


def _mint(base: str) -> str:
    return f"{base}{uuid.uuid4()}"


def _container(subject: str, rdf_type: str, session_predicate: str, ctx: PipelineContext) -> list[Triple]:
    trs = [Triple(subject, RDF_TYPE, rdf_type)]
    trs = link_to_parent(trs, ctx.triples, session_predicate)
    return link_to_origin(trs, ctx.resource.resource)


def _annotated_markup(ctx: PipelineContext) -> str:
    # fresh parse per branch so links are never added twice
    document = parse_document(ctx.resource.rdfa_snippet, ctx.base_iri)
    annotations = annotate_decisions(document, ctx.triples, ctx.today)
    written = apply_annotations(document, annotations)
    log.info("Annotated decisions with %d links", written)
    return document.inner_html()


# ── Branches ───────────────────────────────────────────────────

def build_session(ctx: PipelineContext) -> Result[list[Triple]]:
    data = profiles.select_profile(ctx.triples, profiles.ZITTING)
    data = link_to_origin(data, ctx.resource.resource)
    return Ok(data=dedupe_triples(data))


def build_agenda(ctx: PipelineContext) -> Result[list[Triple]]:
    """Agenda container, plus agendapunten ordered and linked to session and agenda."""
    agenda = _mint(AGENDA_BASE)
    agenda_trs = _container(agenda, AGENDA, EXT_AGENDA, ctx)
    agenda_trs.append(Triple(agenda, PROV_VALUE, ctx.resource.rdfa_snippet))

    agendapunten = profiles.select_profile(_uri_valued(ctx.triples, AANGEBRACHT_NA), profiles.AGENDAPUNT)
    agendapunten = link_to_parent(agendapunten, ctx.triples, BEHANDELT)
    agendapunten = dedupe_triples(agendapunten)
    agendapunten = order_chain(agendapunten, AGENDAPUNT, AANGEBRACHT_NA)
    agendapunten = link_to_container(agendapunten, agenda, EXT_AGENDA_AGENDAPUNT)

    return Ok(data=dedupe_triples([*agenda_trs, *agendapunten]))


def build_uittreksel(ctx: PipelineContext) -> Result[list[Triple]]:
    """Uittreksel container holding the annotated markup, plus bvaps and besluiten."""
    uittreksel = _mint(UITTREKSEL_BASE)
    uittreksel_trs = _container(uittreksel, UITTREKSEL, EXT_UITTREKSEL, ctx)
    uittreksel_trs.append(Triple(uittreksel, PROV_VALUE, _annotated_markup(ctx)))

    bvaps = dedupe_triples(profiles.select_profile(ctx.triples, profiles.BEHANDELING))
    bvaps = link_to_container(bvaps, uittreksel, EXT_UITTREKSEL_BVAP)

    besluiten = dedupe_triples(profiles.select_profile(ctx.triples, profiles.BESLUIT))

    return Ok(data=dedupe_triples([*uittreksel_trs, *bvaps, *besluiten]))


def build_besluitenlijst(ctx: PipelineContext) -> Result[list[Triple]]:
    """Besluitenlijst container, ordered bvaps, linked besluiten and stemmingen."""
    besluitenlijst = _mint(BESLUITENLIJST_BASE)
    lijst_trs = _container(besluitenlijst, BESLUITENLIJST, EXT_BESLUITENLIJST, ctx)
    lijst_trs.append(Triple(besluitenlijst, PROV_VALUE, ctx.resource.rdfa_snippet))
    lijst_trs.append(Triple(besluitenlijst, ELI_DATE_PUBLICATION, ctx.today, XSD_DATE))

    bvaps = profiles.select_profile(_uri_valued(ctx.triples, GEBEURT_NA), profiles.BEHANDELING)
    bvaps = dedupe_triples(bvaps)
    bvaps = order_chain(bvaps, BEHANDELING_VAN_AGENDAPUNT, GEBEURT_NA)

    besluiten = profiles.select_profile(ctx.triples, profiles.BESLUIT)
    besluiten = link_to_container(besluiten, besluitenlijst, EXT_BESLUITENLIJST_BESLUIT)
    besluiten = dedupe_triples(besluiten)

    stemmingen = dedupe_triples(profiles.select_profile(ctx.triples, profiles.STEMMING))

    return Ok(data=dedupe_triples([*lijst_trs, *bvaps, *besluiten, *stemmingen]))


def build_notulen(ctx: PipelineContext) -> Result[list[Triple]]:
    """Notulen with a stable IRI, pointing at the enriched document on the share."""
    notulen = minutes_uri(ctx.session)

    stored = ctx.files.write_document(_annotated_markup(ctx), [ctx.minutes_dir])
    if not stored.ok:
        return stored

    # prov:generated mirrors how published resources point at their files
    trs = [
        Triple(notulen, RDF_TYPE, NOTULEN),
        Triple(notulen, PROV_GENERATED, stored.data),
    ]
    trs = link_to_parent(trs, ctx.triples, HEEFT_NOTULEN)
    trs = link_to_origin(trs, ctx.resource.resource)
    return Ok(data=dedupe_triples(trs))


SESSION_BRANCH = Branch("zitting", None, build_session)

GATED_BRANCHES: tuple[Branch, ...] = (
    Branch("agenda", PUBLISHES_AGENDA, build_agenda),
    Branch("uittreksel", PUBLISHES_BEHANDELING, build_uittreksel),
    Branch("besluitenlijst", PUBLISHES_BESLUITENLIJST, build_besluitenlijst),
    Branch("notulen", PUBLISHES_NOTULEN, build_notulen),
)


# ── Orchestration ──────────────────────────────────────────────

def _run_branch(branch: Branch, ctx: PipelineContext, store: Store, report: RunReport) -> Result[int | None]:
    """Gate check → build → persist. ``Ok(None)`` means the gate was closed."""
    counter = report.summary.counter(branch.name)

    if branch.gate is not None:
        gate = store.belongs_to_type(ctx.resource, branch.gate)
        if not gate.ok:
            counter.failed += 1
            report.branches[branch.name] = "failed"
            return gate
        if not gate.data:
            counter.skipped += 1
            report.branches[branch.name] = "skipped"
            return Ok(data=None)

    built = branch.build(ctx)
    if not built.ok:
        counter.failed += 1
        report.branches[branch.name] = "failed"
        return built

    persisted = store.persist(built.data)
    if not persisted.ok:
        counter.failed += 1
        report.branches[branch.name] = "failed"
        return persisted

    counter.ok += 1
    report.branches[branch.name] = "ok"
    report.persisted += persisted.data
    log.info("Branch '%s' persisted %d triples", branch.name, persisted.data)
    return persisted


def _combine(failures: list[tuple[str, Fail]], report: RunReport) -> Fail:
    kind = (
        FailureKind.STORE
        if any(f.kind is FailureKind.STORE for _, f in failures)
        else FailureKind.DATA
    )
    error = "; ".join(f"{name}: {f.error}" for name, f in failures)
    return Fail(error=error, context=report, kind=kind)


def run_pipeline(
    resource: PublishedResource,
    store: Store,
    files: FileStore,
    *,
    base_iri: str = DEFAULT_BASE_IRI,
    minutes_dir: str = "enriched-notulen",
    fail_fast: bool = False,
    today: str | None = None,
) -> Result[RunReport]:
    """Extract, link and persist everything one published resource carries."""
    triples = preprocess(flatten(resource.rdfa_snippet, base_iri))
    log.info("Flattened %s into %d triples", resource.resource, len(triples))

    try:
        session = find_session(triples)
    except MissingSessionError as exc:
        return Fail(error=str(exc), context=resource.resource, kind=FailureKind.DATA)
    others = {t.subject for t in triples if has_type(t, ZITTING)} - {session}
    if others:
        log.warning("Snippet holds %d sessions, linking to %s only", len(others) + 1, session)

    ctx = PipelineContext(
        resource=resource,
        triples=triples,
        session=session,
        today=today or utc_today(),
        files=files,
        base_iri=base_iri,
        minutes_dir=minutes_dir,
    )
    report = RunReport(resource=resource.resource, session=session)
    failures: list[tuple[str, Fail]] = []

    # 1. Session first: every container links to it
    result = _run_branch(SESSION_BRANCH, ctx, store, report)
    if not result.ok:
        log.error("Session branch failed: %s", result.error)
        return _combine([(SESSION_BRANCH.name, result)], report)

    # 2. Gated branches
    for branch in GATED_BRANCHES:
        result = _run_branch(branch, ctx, store, report)
        if result.ok:
            continue
        log.warning("Branch '%s' failed: %s", branch.name, result.error)
        failures.append((branch.name, result))
        if fail_fast:
            return _combine(failures, report)

    # 3. Permalink
    permalink = store.resolve_permalink(session)
    if not permalink.ok:
        log.warning("Permalink for %s failed: %s", session, permalink.error)
        failures.append(("permalink", permalink))

    if failures:
        return _combine(failures, report)
    return Ok(data=report)
