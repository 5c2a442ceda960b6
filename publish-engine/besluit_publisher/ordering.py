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

"""Ordering reconstructor: positions from an "occurs after" linked list.

Agenda items (``besluit:aangebrachtNa``) and treatments
(``besluit:gebeurtNa``) point at their predecessor. Walking the chain from
the single item without a predecessor yields a zero-based
``schema:position`` per item.

Broken data never raises here: the input comes back without positions and
a warning is logged. An unordered list is better than no list.
"""

from __future__ import annotations

from collections.abc import Sequence

from besluit_publisher.logger import get_logger
from besluit_publisher.terms import Triple, dedupe_triples, expand_uri, find_triple_with_object, has_type
from besluit_publisher.vocabulary import AANGEBRACHT_NA, AGENDAPUNT, SCHEMA_POSITION, XSD_INTEGER

log = get_logger(__name__)


class OrderingAnomaly(Exception):
    """The after-relation is not a single linear chain."""


def _walk(root: str, links: Sequence[Triple], rdf_type: str) -> list[str]:
    chain = [root]
    visited = {root}
    current = root
    for _ in links:
        nxt = find_triple_with_object(links, current)
        if nxt is None:
            raise OrderingAnomaly(f"Ordering of {rdf_type} is unexpected, we expect linear ordering")
        if nxt.subject in visited:
            raise OrderingAnomaly(f"Ordering of {rdf_type} loops back to {nxt.subject}")
        chain.append(nxt.subject)
        visited.add(nxt.subject)
        current = nxt.subject
    return chain


def order_chain(
    triples: Sequence[Triple],
    rdf_type: str = AGENDAPUNT,
    after_predicate: str = AANGEBRACHT_NA,
) -> list[Triple]:
    """Append a ``schema:position`` triple per item of the ``rdf_type`` chain.

    Returns the input unchanged when there is no ordering information, or
    when the chain is not linear (no root, several roots, gaps, loops).
    """
    after = expand_uri(after_predicate)
    links = dedupe_triples(t for t in triples if expand_uri(t.predicate) == after)
    if not links:
        return list(triples)

    linked = {t.subject for t in links}
    roots: list[str] = []
    for t in triples:
        if has_type(t, rdf_type) and t.subject not in linked and t.subject not in roots:
            roots.append(t.subject)

    try:
        if len(roots) != 1:
            raise OrderingAnomaly(f"Found {len(roots)} potential root {rdf_type}, expected exactly one")
        chain = _walk(roots[0], links, rdf_type)
    except OrderingAnomaly as exc:
        log.warning("%s", exc)
        if roots:
            log.warning("See also %s for broken data.", ", ".join(roots))
        log.warning("Returning %s without order", rdf_type)
        return list(triples)

    positions = [
        Triple(subject=subject, predicate=SCHEMA_POSITION, object=str(index), datatype=XSD_INTEGER)
        for index, subject in enumerate(chain)
    ]
    return [*triples, *positions]
