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

"""Entity profiles: which predicates are persisted per type, and as what.

Each profile is an ordered ``{predicate: ValueKind}`` schema following the
application profile of the entity. We are conservative in what we persist:
triples on a profiled subject whose predicate is not in the profile are
dropped.

Predicates listed in ``derived`` are added by the pipeline itself (links
to containers) and are never selected from the source snippet.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from besluit_publisher import vocabulary as v
from besluit_publisher.terms import Triple, expand_uri, has_type


class ValueKind(str, Enum):
    URI = "uri"
    TEXT = "text"
    DATE = "date"
    DATETIME = "datetime"
    INT = "int"
    BOOL = "bool"


@dataclass(frozen=True, slots=True)
class Profile:
    name: str
    rdf_type: str
    fields: dict[str, ValueKind]
    derived: frozenset[str] = frozenset()

    @property
    def points_of_interest(self) -> tuple[str, ...]:
        """Predicates selectable from the source snippet, in profile order."""
        return tuple(p for p in self.fields if p not in self.derived)


U, T, D, DT, I, B = (
    ValueKind.URI, ValueKind.TEXT, ValueKind.DATE,
    ValueKind.DATETIME, ValueKind.INT, ValueKind.BOOL,
)

# ── Member entities ────────────────────────────────────────────

ZITTING = Profile(
    name="zitting",
    rdf_type=v.ZITTING,
    fields={
        v.RDF_TYPE: U,
        v.BESLUIT + "geplandeStart": DT,
        v.PROV + "startedAtTime": DT,
        v.IS_GEHOUDEN_DOOR: U,
        v.BEHANDELT: U,
        v.PROV + "endedAtTime": DT,
        v.BESLUIT + "heeftAanwezigeBijStart": U,
        v.HEEFT_NOTULEN: U,
        v.BESLUIT + "heeftSecretaris": U,
        v.BESLUIT + "heeftVoorzitter": U,
        v.BESLUIT + "heeftZittingsverslag": U,
        v.PROV + "atLocation": T,
        v.PROV_WAS_DERIVED_FROM: U,
        v.EXT_BESLUITENLIJST: U,
        v.EXT_UITTREKSEL: U,
        v.EXT_AGENDA: U,
    },
    derived=frozenset({v.EXT_BESLUITENLIJST, v.EXT_UITTREKSEL, v.EXT_AGENDA}),
)

AGENDAPUNT = Profile(
    name="agendapunt",
    rdf_type=v.AGENDAPUNT,
    fields={
        v.RDF_TYPE: U,
        v.AANGEBRACHT_NA: U,
        v.DCT + "description": T,
        v.BESLUIT + "geplandOpenbaar": B,
        v.BESLUIT + "heeftOntwerpbesluit": U,
        v.DCT + "references": U,
        v.DCT + "title": T,
        v.BESLUIT + "Agendapunt.type": U,
        v.SCHEMA_POSITION: I,
        v.PROV_WAS_DERIVED_FROM: U,
        v.BEHANDELT: U,
    },
)

BEHANDELING = Profile(
    name="behandeling",
    rdf_type=v.BEHANDELING_VAN_AGENDAPUNT,
    fields={
        v.RDF_TYPE: U,
        v.GEBEURT_NA: U,
        v.PROV_GENERATED: U,
        v.BESLUIT + "heeftAanwezige": U,
        v.DCT_SUBJECT: U,
        v.BESLUIT + "heeftSecretaris": U,
        v.BESLUIT + "heeftStemming": U,
        v.BESLUIT + "heeftVoorzitter": U,
        v.BESLUIT + "openbaar": B,
        v.SCHEMA_POSITION: I,
        v.PROV_WAS_DERIVED_FROM: U,
        v.EXT + "besluitPublicatieLinkedBvap": U,
    },
)

BESLUIT = Profile(
    name="besluit",
    rdf_type=v.BESLUIT_TYPE,
    fields={
        v.RDF_TYPE: U,
        v.ELI + "description": T,
        v.ELI + "title_short": T,
        v.BESLUIT + "motivering": T,
        v.ELI_DATE_PUBLICATION: D,
        v.ELI + "realizes": U,
        v.PROV_WAS_GENERATED_BY: U,
        v.ELI + "title": T,
        v.ELI + "language": T,
        v.ELI + "has_part": T,
        v.PROV_VALUE: T,
        v.PROV_WAS_DERIVED_FROM: U,
        v.EXT + "besluitPublicatieLinkedBesluit": U,
        v.ELI + "related_to": U,
    },
)

STEMMING = Profile(
    name="stemming",
    rdf_type=v.STEMMING,
    fields={
        v.RDF_TYPE: U,
        v.BESLUIT + "onderwerp": T,
        v.BESLUIT + "gevolg": T,
    },
)

# ── Derived containers ─────────────────────────────────────────

AGENDA = Profile(
    name="agenda",
    rdf_type=v.AGENDA,
    fields={
        v.RDF_TYPE: U,
        v.EXT_AGENDA_AGENDAPUNT: U,
        v.PROV_VALUE: T,
        v.PROV_WAS_DERIVED_FROM: U,
    },
    derived=frozenset({v.EXT_AGENDA_AGENDAPUNT}),
)

BESLUITENLIJST = Profile(
    name="besluitenlijst",
    rdf_type=v.BESLUITENLIJST,
    fields={
        v.RDF_TYPE: U,
        v.EXT_BESLUITENLIJST_BESLUIT: U,
        v.PROV_VALUE: T,
        v.ELI_DATE_PUBLICATION: D,
        v.PROV_WAS_DERIVED_FROM: U,
    },
    derived=frozenset({v.EXT_BESLUITENLIJST_BESLUIT}),
)

UITTREKSEL = Profile(
    name="uittreksel",
    rdf_type=v.UITTREKSEL,
    fields={
        v.RDF_TYPE: U,
        v.EXT_UITTREKSEL_BVAP: U,
        v.PROV_VALUE: T,
        v.PROV_WAS_DERIVED_FROM: U,
    },
    derived=frozenset({v.EXT_UITTREKSEL_BVAP}),
)

NOTULEN = Profile(
    name="notulen",
    rdf_type=v.NOTULEN,
    fields={
        v.RDF_TYPE: U,
        v.PROV_VALUE: T,
        v.PROV_GENERATED: U,
        v.HEEFT_NOTULEN: U,
        v.PROV_WAS_DERIVED_FROM: U,
    },
)

ALL_PROFILES: tuple[Profile, ...] = (
    BESLUIT, BEHANDELING, AGENDAPUNT, ZITTING,
    NOTULEN, BESLUITENLIJST, UITTREKSEL, AGENDA, STEMMING,
)


def _build_value_kinds(profiles: Iterable[Profile]) -> dict[str, ValueKind]:
    kinds: dict[str, ValueKind] = {}
    for profile in profiles:
        for predicate, kind in profile.fields.items():
            kinds.setdefault(predicate, kind)
    return kinds


VALUE_KINDS = _build_value_kinds(ALL_PROFILES)


def value_kind_for(predicate: str) -> ValueKind | None:
    """Value kind of a predicate across all profiles (first declaration wins)."""
    return VALUE_KINDS.get(expand_uri(predicate))


def select_entities(triples: Sequence[Triple], rdf_type: str, poi: Iterable[str]) -> list[Triple]:
    """Triples on subjects typed ``rdf_type`` whose predicate is in ``poi``.

    Input order is preserved.
    """
    allowed = {expand_uri(p) for p in poi}
    candidates = {t.subject for t in triples if has_type(t, rdf_type)}
    return [
        t for t in triples
        if t.subject in candidates and expand_uri(t.predicate) in allowed
    ]


def select_profile(triples: Sequence[Triple], profile: Profile) -> list[Triple]:
    return select_entities(triples, profile.rdf_type, profile.points_of_interest)
