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

"""RDFa flattener: turns an HTML+RDFa snippet into a flat triple list.

Implements the RDFa 1.1 core processing walk for the attributes used by
published meeting documents:
  about, resource, href, src, typeof, property, rel, rev,
  content, datatype, vocab, prefix, xmlns:*

Not handled: @inlist, @lang, initial terms. XMLLiteral / HTML datatypes
are serialised as markup.

While walking, the element that establishes each subject is recorded in
``RdfaDocument.subject_nodes`` so later stages can find a resource's
sub-document without re-querying the DOM. Elements carrying the subject's
``typeof`` are also kept in ``typed_nodes`` and win over plain links.
"""

from __future__ import annotations

import html
import itertools
from dataclasses import dataclass, field
from urllib.parse import urljoin

import lxml.html
from lxml import etree

from besluit_publisher.logger import get_logger
from besluit_publisher.terms import Triple, dedupe_triples
from besluit_publisher.vocabulary import RDF_TYPE

log = get_logger(__name__)

# Snippets are relative documents; any placeholder origin works.
DEFAULT_BASE_IRI = "https://www.rubensworks.net/"

_RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
_MARKUP_DATATYPES = {_RDF + "XMLLiteral", _RDF + "HTML"}
_XHV = "http://www.w3.org/1999/xhtml/vocab#"

# Subset of the W3C RDFa 1.1 initial context.
RDFA_INITIAL_CONTEXT: dict[str, str] = {
    "as": "https://www.w3.org/ns/activitystreams#",
    "cc": "http://creativecommons.org/ns#",
    "dc": "http://purl.org/dc/terms/",
    "dc11": "http://purl.org/dc/elements/1.1/",
    "dcat": "http://www.w3.org/ns/dcat#",
    "dcterms": "http://purl.org/dc/terms/",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "ldp": "http://www.w3.org/ns/ldp#",
    "oa": "http://www.w3.org/ns/oa#",
    "og": "http://ogp.me/ns#",
    "org": "http://www.w3.org/ns/org#",
    "owl": "http://www.w3.org/2002/07/owl#",
    "prov": "http://www.w3.org/ns/prov#",
    "rdf": _RDF,
    "rdfa": "http://www.w3.org/ns/rdfa#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "schema": "http://schema.org/",
    "sioc": "http://rdfs.org/sioc/ns#",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "skosxl": "http://www.w3.org/2008/05/skos-xl#",
    "time": "http://www.w3.org/2006/time#",
    "vcard": "http://www.w3.org/2006/vcard/ns#",
    "void": "http://rdfs.org/ns/void#",
    "xhv": _XHV,
    "xml": "http://www.w3.org/XML/1998/namespace",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
}


@dataclass
class RdfaDocument:
    """A parsed snippet: DOM body, emitted triples and subject → element index."""

    body: lxml.html.HtmlElement
    triples: list[Triple] = field(default_factory=list)
    subject_nodes: dict[str, list[lxml.html.HtmlElement]] = field(default_factory=dict)
    typed_nodes: dict[str, list[lxml.html.HtmlElement]] = field(default_factory=dict)

    def node_for(self, subject: str) -> lxml.html.HtmlElement | None:
        """Element that typed ``subject``, else the first that referenced it, or None."""
        nodes = self.typed_nodes.get(subject) or self.subject_nodes.get(subject)
        return nodes[0] if nodes else None

    def inner_html(self) -> str:
        """Serialise the body content (without the body tag itself)."""
        parts = [html.escape(self.body.text or "", quote=False)]
        for child in self.body:
            parts.append(lxml.html.tostring(child, encoding="unicode"))
        return "".join(parts)


@dataclass(frozen=True)
class _Context:
    parent_subject: str
    parent_object: str
    prefixes: dict[str, str]
    vocab: str | None = None
    incomplete: tuple[tuple[str, bool], ...] = ()


class _Walker:
    """One RDFa processing pass over a parsed body."""

    def __init__(self, base_iri: str) -> None:
        self.base = base_iri
        self.triples: list[Triple] = []
        self.subject_nodes: dict[str, list[lxml.html.HtmlElement]] = {}
        self.typed_nodes: dict[str, list[lxml.html.HtmlElement]] = {}
        self._bnodes = itertools.count()

    # ── term resolution ────────────────────────────────────────

    def _bnode(self) -> str:
        return f"_:b{next(self._bnodes)}"

    def _iri(self, value: str) -> str | None:
        try:
            return urljoin(self.base, value.strip())
        except ValueError as exc:
            log.warning("Unusable IRI %r: %s", value, exc)
            return None

    def _curie(self, value: str, ctx: _Context) -> str | None:
        prefix, sep, reference = value.partition(":")
        if not sep or reference.startswith("//"):
            return None
        if prefix == "_":
            return value
        if prefix == "":
            return _XHV + reference
        namespace = ctx.prefixes.get(prefix.lower())
        return namespace + reference if namespace else None

    def _resource(self, value: str | None, ctx: _Context) -> str | None:
        """SafeCURIEorCURIEorIRI (about, resource)."""
        if value is None:
            return None
        value = value.strip()
        if value.startswith("[") and value.endswith("]"):
            return self._curie(value[1:-1], ctx)
        return self._curie(value, ctx) or self._iri(value)

    def _term(self, token: str, ctx: _Context) -> str | None:
        """TERMorCURIEorAbsIRI (typeof, property, rel, rev, datatype)."""
        if ":" in token:
            # An unresolved CURIE stays as written; expand_uri deals with it later.
            return self._curie(token, ctx) or token
        if ctx.vocab:
            return ctx.vocab + token
        log.debug("Dropping term %r: no vocab in scope", token)
        return None

    def _terms(self, value: str | None, ctx: _Context) -> list[str] | None:
        if value is None:
            return None
        terms = [t for t in (self._term(tok, ctx) for tok in value.split()) if t]
        return terms or None

    # ── local context ──────────────────────────────────────────

    @staticmethod
    def _local_prefixes(element: lxml.html.HtmlElement, ctx: _Context) -> dict[str, str]:
        declared: dict[str, str] = {}
        for name, value in element.attrib.items():
            if name.startswith("xmlns:"):
                declared[name[len("xmlns:"):].lower()] = value.strip()

        tokens = element.get("prefix", "").split()
        for name, namespace in zip(tokens[::2], tokens[1::2]):
            if name.endswith(":"):
                declared[name[:-1].lower()] = namespace
            else:
                log.warning("Malformed prefix declaration %r on <%s>", name, element.tag)

        if not declared:
            return ctx.prefixes
        return {**ctx.prefixes, **declared}

    # ── processing ─────────────────────────────────────────────

    def _emit(self, subject: str, predicate: str, obj: str, datatype: str | None = None) -> None:
        self.triples.append(Triple(subject=subject, predicate=predicate, object=obj, datatype=datatype))

    def _establish(self, subject: str, element: lxml.html.HtmlElement, typed: bool = False) -> None:
        if typed:
            typed_nodes = self.typed_nodes.setdefault(subject, [])
            if element not in typed_nodes:
                typed_nodes.append(element)
        nodes = self.subject_nodes.setdefault(subject, [])
        if element not in nodes:
            nodes.append(element)

    def _literal(self, element: lxml.html.HtmlElement, content: str | None, datatype: str | None) -> str:
        if datatype in _MARKUP_DATATYPES:
            inner = [html.escape(element.text or "", quote=False)]
            inner.extend(lxml.html.tostring(child, encoding="unicode") for child in element)
            return "".join(inner)
        if content is not None:
            return content
        return element.text_content()

    def walk(self, element: lxml.html.HtmlElement, ctx: _Context) -> None:
        vocab = ctx.vocab
        if "vocab" in element.attrib:
            vocab = element.get("vocab").strip() or None
        ctx = _Context(
            parent_subject=ctx.parent_subject,
            parent_object=ctx.parent_object,
            prefixes=self._local_prefixes(element, ctx),
            vocab=vocab,
            incomplete=ctx.incomplete,
        )

        about = self._resource(element.get("about"), ctx)
        resource = self._resource(element.get("resource"), ctx)
        if resource is None and element.get("href") is not None:
            resource = self._iri(element.get("href"))
        if resource is None and element.get("src") is not None:
            resource = self._iri(element.get("src"))

        has_typeof = "typeof" in element.attrib
        types = self._terms(element.get("typeof"), ctx) or []
        properties = self._terms(element.get("property"), ctx)
        rels = self._terms(element.get("rel"), ctx)
        revs = self._terms(element.get("rev"), ctx)
        content = element.get("content")
        datatype_attr = element.get("datatype")

        new_subject: str | None = None
        current_object: str | None = None
        typed_resource: str | None = None
        skip = False

        if rels is None and revs is None:
            if properties is not None and content is None and datatype_attr is None:
                new_subject = about or ctx.parent_object
                if about:
                    self._establish(about, element)
                if has_typeof:
                    typed_resource = about or resource or self._bnode()
                    current_object = typed_resource
            else:
                if about or resource:
                    new_subject = about or resource
                    self._establish(new_subject, element)
                elif has_typeof:
                    new_subject = self._bnode()
                else:
                    new_subject = ctx.parent_object
                    skip = properties is None
                if has_typeof:
                    typed_resource = new_subject
        else:
            new_subject = about or ctx.parent_object
            if about:
                self._establish(about, element)
                if has_typeof:
                    typed_resource = about
            if resource:
                current_object = resource
            elif has_typeof and not about:
                current_object = self._bnode()
            if has_typeof and not about:
                typed_resource = current_object

        if typed_resource:
            self._establish(typed_resource, element, typed=True)
            for rdf_type in types:
                self._emit(typed_resource, RDF_TYPE, rdf_type)

        if not skip and ctx.incomplete:
            for predicate, forward in ctx.incomplete:
                if forward:
                    self._emit(ctx.parent_subject, predicate, new_subject)
                else:
                    self._emit(new_subject, predicate, ctx.parent_subject)

        local_incomplete: list[tuple[str, bool]] = []
        if current_object:
            for rel in rels or []:
                self._emit(new_subject, rel, current_object)
            for rev in revs or []:
                self._emit(current_object, rev, new_subject)
        elif rels or revs:
            current_object = self._bnode()
            local_incomplete.extend((rel, True) for rel in rels or [])
            local_incomplete.extend((rev, False) for rev in revs or [])

        for prop in properties or []:
            datatype: str | None = None
            if datatype_attr:
                datatype = self._term(datatype_attr.strip(), ctx)
                value = self._literal(element, content, datatype)
            elif datatype_attr is not None or content is not None:
                value = self._literal(element, content, None)
            elif rels is None and revs is None and resource and not has_typeof:
                value = resource
            elif has_typeof and not about and typed_resource:
                value = typed_resource
            else:
                value = self._literal(element, None, None)
            self._emit(new_subject, prop, value, datatype)

        if skip:
            child_ctx = ctx
        else:
            child_ctx = _Context(
                parent_subject=new_subject,
                parent_object=current_object or new_subject,
                prefixes=ctx.prefixes,
                vocab=ctx.vocab,
                incomplete=tuple(local_incomplete),
            )

        for child in element:
            if not isinstance(child.tag, str):
                continue  # comments, processing instructions
            self.walk(child, child_ctx)


def _parse_body(snippet: str) -> lxml.html.HtmlElement:
    parser = lxml.html.HTMLParser(recover=True, remove_comments=True)
    try:
        root = lxml.html.document_fromstring(f"<html><body>{snippet}</body></html>", parser=parser)
    except (etree.ParserError, etree.XMLSyntaxError) as exc:
        log.warning("RDFa snippet could not be parsed: %s", exc)
        return lxml.html.document_fromstring("<html><body></body></html>").body

    for entry in parser.error_log:
        if entry.type_name == "HTML_UNKNOWN_TAG":
            continue  # html5 elements unknown to libxml2
        log.warning("RDFa parse problem at line %d: %s", entry.line, entry.message)
    return root.body


def parse_document(snippet: str, base_iri: str = DEFAULT_BASE_IRI) -> RdfaDocument:
    """Parse a snippet and run the RDFa walk over every top-level element.

    Triples are returned in emission order, not deduplicated.
    """
    body = _parse_body(snippet)
    walker = _Walker(base_iri)
    ctx = _Context(
        parent_subject=base_iri,
        parent_object=base_iri,
        prefixes=dict(RDFA_INITIAL_CONTEXT),
    )
    for child in body:
        if isinstance(child.tag, str):
            walker.walk(child, ctx)

    log.debug("Flattened %d triples", len(walker.triples))
    return RdfaDocument(
        body=body,
        triples=walker.triples,
        subject_nodes=walker.subject_nodes,
        typed_nodes=walker.typed_nodes,
    )


def flatten(snippet: str, base_iri: str = DEFAULT_BASE_IRI) -> list[Triple]:
    """Flat, deduplicated triple list for an RDFa snippet."""
    return dedupe_triples(parse_document(snippet, base_iri).triples)
