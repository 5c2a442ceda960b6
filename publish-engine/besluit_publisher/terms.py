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

"""Triple type and term helpers: URI detection, CURIE expansion, dedup.

Pure functions, no state.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from besluit_publisher.logger import get_logger
from besluit_publisher.vocabulary import DEFAULT_PREFIX_MAP, RDF_TYPE

log = get_logger(__name__)

_URI_RE = re.compile(r"^https?://(.*)")


@dataclass(frozen=True, slots=True)
class Triple:
    subject: str
    predicate: str
    object: str
    datatype: str | None = None


def is_uri(value: str | None) -> bool:
    """True for http(s) IRIs. Anything else is treated as a literal."""
    return bool(value) and _URI_RE.match(value) is not None


def expand_uri(term: str | None, prefix_map: Mapping[str, str] = DEFAULT_PREFIX_MAP) -> str | None:
    """Expand a CURIE (or the ``a`` shorthand) to a full IRI.

    Full IRIs are returned unchanged. Unknown prefixes are logged and the
    term is returned as given.
    """
    if term is None or is_uri(term):
        return term
    if term == "a":
        return RDF_TYPE

    prefix, sep, local = term.partition(":")
    if sep and prefix != "_":
        expansion = prefix_map.get(prefix)
        if expansion:
            return f"{expansion}{local}"
        log.warning("Prefix %s not found in prefix map, not expanding uri: %s", prefix, term)
    return term


def hash_triple(triple: Triple) -> str:
    """Naive ttl-ish rendering of a triple, used as a dedup key only.

    Language tags are ignored.
    """
    subject = f"<{triple.subject}>" if is_uri(triple.subject) else triple.subject
    predicate = f"<{triple.predicate}>" if is_uri(triple.predicate) else triple.predicate

    if is_uri(triple.object):
        obj = f"<{triple.object}>"
    elif triple.datatype:
        if is_uri(triple.datatype):
            obj = f'"{triple.object}"^^<{triple.datatype}>'
        else:
            obj = f'"{triple.object}^^{triple.datatype}'
    else:
        obj = f'"{triple.object}"'
    return f"{subject} {predicate} {obj}"


def dedupe_triples(triples: Iterable[Triple]) -> list[Triple]:
    """Drop exact duplicates, keeping the first occurrence and input order."""
    seen: set[str] = set()
    deduped: list[Triple] = []
    for triple in triples:
        key = hash_triple(triple)
        if key not in seen:
            seen.add(key)
            deduped.append(triple)
    return deduped


def find_triple_with_object(triples: Iterable[Triple], obj: str) -> Triple | None:
    return next((t for t in triples if t.object == obj), None)


def is_type_triple(triple: Triple) -> bool:
    return expand_uri(triple.predicate) == RDF_TYPE


def has_type(triple: Triple, rdf_type: str) -> bool:
    """True for ``(s, rdf:type, rdf_type)`` after expansion of both sides."""
    return is_type_triple(triple) and expand_uri(triple.object) == expand_uri(rdf_type)
