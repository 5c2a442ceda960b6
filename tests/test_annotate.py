"""Tests for decision annotation."""

from datetime import date

from conftest import (
    AP1,
    BESLUIT1,
    BESLUIT2,
    BVAP1,
    DECISION_SNIPPET,
    ORGAAN_URI,
    PREFIXES,
    ZITTING_URI,
)

from besluit_publisher.annotate import Annotation, annotate_decisions, apply_annotations
from besluit_publisher.rdfa import flatten, parse_document
from besluit_publisher.terms import Triple
from besluit_publisher.vocabulary import (
    BEHANDELT,
    ELI_DATE_PUBLICATION,
    ELI_PASSED_BY,
    PROV_WAS_GENERATED_BY,
    XSD_DATE,
)

TODAY = "2024-03-02"

# The decision is mentioned by a plain anchor before its own typed node.
LINKED_BEFORE_TYPED = f"""
<div prefix="{PREFIXES}">
  <div resource="{ZITTING_URI}" typeof="besluit:Zitting">
    <div property="besluit:behandelt" resource="{AP1}" typeof="besluit:Agendapunt"></div>
    <div resource="{BVAP1}" typeof="besluit:BehandelingVanAgendapunt">
      <span property="dct:subject" resource="{AP1}"></span>
      <p>Zie <a href="{BESLUIT1}">het besluit</a></p>
      <div property="prov:generated" resource="{BESLUIT1}" typeof="besluit:Besluit">
        <span property="eli:title">Besluit 1</span>
      </div>
    </div>
  </div>
</div>
"""


def _for(annotations, host):
    return [a for a in annotations if a.host == host]


class TestAnnotateDecisions:

    def test_directives_for_generated_decision(self):
        document = parse_document(DECISION_SNIPPET)
        annotations = annotate_decisions(document, flatten(DECISION_SNIPPET), TODAY)
        assert _for(annotations, BESLUIT1) == [
            Annotation(BESLUIT1, BESLUIT1, PROV_WAS_GENERATED_BY, BVAP1),
            Annotation(BESLUIT1, ZITTING_URI, BEHANDELT, AP1),
            Annotation(BESLUIT1, BESLUIT1, ELI_DATE_PUBLICATION, TODAY, datatype=XSD_DATE, is_resource=False),
            Annotation(BESLUIT1, BESLUIT1, ELI_PASSED_BY, ORGAAN_URI),
        ]

    def test_treatment_without_subject_gives_no_provenance(self):
        document = parse_document(DECISION_SNIPPET)
        predicates = [a.predicate for a in _for(annotate_decisions(document, flatten(DECISION_SNIPPET), TODAY), BESLUIT2)]
        assert predicates == [ELI_DATE_PUBLICATION, ELI_PASSED_BY]

    def test_date_object_accepted(self):
        document = parse_document(DECISION_SNIPPET)
        annotations = annotate_decisions(document, flatten(DECISION_SNIPPET), date(2024, 3, 2))
        assert any(a.value == TODAY for a in annotations)

    def test_decision_outside_document_skipped(self):
        document = parse_document("<p>no decisions here</p>")
        assert annotate_decisions(document, flatten(DECISION_SNIPPET), TODAY) == []


class TestApplyAnnotations:

    def test_links_written_and_reparsed(self):
        document = parse_document(DECISION_SNIPPET)
        annotations = annotate_decisions(document, flatten(DECISION_SNIPPET), TODAY)
        assert apply_annotations(document, annotations) == len(annotations)

        reparsed = flatten(document.inner_html())
        assert Triple(BESLUIT1, PROV_WAS_GENERATED_BY, BVAP1) in reparsed
        assert Triple(ZITTING_URI, BEHANDELT, AP1) in reparsed
        assert Triple(BESLUIT1, ELI_DATE_PUBLICATION, TODAY, XSD_DATE) in reparsed
        assert Triple(BESLUIT2, ELI_PASSED_BY, ORGAAN_URI) in reparsed

    def test_unknown_host_skipped(self):
        document = parse_document(DECISION_SNIPPET)
        stray = Annotation("http://e/unknown", "http://e/unknown", ELI_PASSED_BY, ORGAAN_URI)
        assert apply_annotations(document, [stray]) == 0

    def test_links_land_on_typed_decision_node(self):
        document = parse_document(LINKED_BEFORE_TYPED)
        annotations = annotate_decisions(document, flatten(LINKED_BEFORE_TYPED), TODAY)
        assert apply_annotations(document, annotations) == 3

        anchor = document.body.xpath("//a")[0]
        assert anchor.findall("link") == []
        decision = document.body.xpath("//div[@typeof='besluit:Besluit']")[0]
        assert [link.get("property") for link in decision.findall("link")] == [
            PROV_WAS_GENERATED_BY,
            BEHANDELT,
            ELI_DATE_PUBLICATION,
        ]
