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

"""Linker: attaches extracted resources to session, container and origin.

"The resources just extracted" are the subjects of ``rdf:type`` triples in
the batch, so type triples must be in place before linking. A subject with
several types gets one link per type triple; the final dedup collapses
them.
"""

from __future__ import annotations

from collections.abc import Sequence

from besluit_publisher.terms import Triple, has_type, is_type_triple
from besluit_publisher.vocabulary import PROV_WAS_DERIVED_FROM, ZITTING


class MissingSessionError(LookupError):
    """No ``besluit:Zitting`` typed subject in the snippet."""


def find_session(triples: Sequence[Triple]) -> str:
    """Subject of the first session type triple."""
    for triple in triples:
        if has_type(triple, ZITTING):
            return triple.subject
    raise MissingSessionError("No resource typed besluit:Zitting found in snippet")


def typed_subjects(triples: Sequence[Triple]) -> list[str]:
    return [t.subject for t in triples if is_type_triple(t)]


def link_to_parent(new: Sequence[Triple], source: Sequence[Triple], predicate: str) -> list[Triple]:
    """``(session, predicate, s)`` for every typed subject in ``new``."""
    session = find_session(source)
    links = [Triple(session, predicate, subject) for subject in typed_subjects(new)]
    return [*new, *links]


def link_to_container(new: Sequence[Triple], container: str, predicate: str) -> list[Triple]:
    """``(container, predicate, s)`` for every typed subject in ``new``."""
    links = [Triple(container, predicate, subject) for subject in typed_subjects(new)]
    return [*new, *links]


def link_to_origin(new: Sequence[Triple], origin: str) -> list[Triple]:
    """``(s, prov:wasDerivedFrom, origin)`` for every typed subject in ``new``."""
    links = [Triple(subject, PROV_WAS_DERIVED_FROM, origin) for subject in typed_subjects(new)]
    return [*new, *links]
