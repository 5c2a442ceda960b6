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

"""Decision annotator: extra RDFa links on decision sub-documents.

Published decisions get, inside their own markup:
  1. prov:wasGeneratedBy → the treatment that generated them, and on the
     session, besluit:behandelt → the treated agenda item
  2. eli:date_publication → today
  3. eli:passed_by → the body holding the session, when known

``annotate_decisions`` only computes directives; ``apply_annotations``
writes them into an RdfaDocument as ``<link>`` elements.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timezone

from lxml import etree

from besluit_publisher.logger import get_logger
from besluit_publisher.rdfa import RdfaDocument
from besluit_publisher.terms import Triple, expand_uri, has_type
from besluit_publisher.vocabulary import (
    BEHANDELT,
    BESLUIT_TYPE,
    DCT_SUBJECT,
    ELI_DATE_PUBLICATION,
    ELI_PASSED_BY,
    IS_GEHOUDEN_DOOR,
    PROV_GENERATED,
    PROV_WAS_GENERATED_BY,
    XSD_DATE,
    ZITTING,
)

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Annotation:
    """One link to add inside the markup of ``host``.

    ``subject`` differs from ``host`` when the link describes another
    resource (it is then written with an ``about`` attribute).
    """

    host: str
    subject: str
    predicate: str
    value: str
    datatype: str | None = None
    is_resource: bool = True


def utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _generating_treatment(decision: str, triples: Sequence[Triple]) -> tuple[str, str] | None:
    """(treatment, agenda item) for the first treatment of ``decision`` with a subject."""
    treatments = [
        t.subject for t in triples
        if expand_uri(t.predicate) == PROV_GENERATED and t.object == decision
    ]
    for treatment in treatments:
        for t in triples:
            if t.subject == treatment and expand_uri(t.predicate) == DCT_SUBJECT:
                return treatment, t.object
    return None


def annotations_for_decision(
    decision: str,
    triples: Sequence[Triple],
    today: str,
) -> list[Annotation]:
    annotations: list[Annotation] = []

    generated = _generating_treatment(decision, triples)
    if generated:
        treatment, agendapunt = generated
        annotations.append(Annotation(decision, decision, PROV_WAS_GENERATED_BY, treatment))
        # assumes one session per snippet
        session = next((t.subject for t in triples if has_type(t, ZITTING)), None)
        if session:
            annotations.append(Annotation(decision, session, BEHANDELT, agendapunt))

    annotations.append(
        Annotation(decision, decision, ELI_DATE_PUBLICATION, today, datatype=XSD_DATE, is_resource=False)
    )

    body = next((t.object for t in triples if expand_uri(t.predicate) == IS_GEHOUDEN_DOOR), None)
    if body:
        annotations.append(Annotation(decision, decision, ELI_PASSED_BY, body))
    return annotations


def annotate_decisions(
    document: RdfaDocument,
    triples: Sequence[Triple],
    today: str | date | None = None,
) -> list[Annotation]:
    """Annotation directives for every decision present in ``document``."""
    if today is None:
        today = utc_today()
    elif isinstance(today, date):
        today = today.isoformat()

    decisions: list[str] = []
    for t in triples:
        if has_type(t, BESLUIT_TYPE) and t.subject not in decisions:
            decisions.append(t.subject)

    annotations: list[Annotation] = []
    for decision in decisions:
        if document.node_for(decision) is None:
            log.info("Decision %s has no node in this document, not annotating", decision)
            continue
        annotations.extend(annotations_for_decision(decision, triples, today))
    return annotations


def apply_annotations(document: RdfaDocument, annotations: Sequence[Annotation]) -> int:
    """Append a ``<link>`` per annotation to its host node. Returns links written."""
    written = 0
    for annotation in annotations:
        node = document.node_for(annotation.host)
        if node is None:
            log.warning("Could not find resource %s", annotation.host)
            continue

        attrib: dict[str, str] = {}
        if annotation.subject != annotation.host:
            attrib["about"] = annotation.subject
        attrib["property"] = annotation.predicate
        if annotation.is_resource:
            attrib["resource"] = annotation.value
        else:
            if annotation.datatype:
                attrib["datatype"] = annotation.datatype
            attrib["content"] = annotation.value
        etree.SubElement(node, "link", attrib)
        written += 1
    return written
