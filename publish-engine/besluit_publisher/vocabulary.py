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

"""Fixed vocabulary: prefix table, namespaces, classes and predicates.

Everything here is configuration of the publishing domain (Flemish local
decisions, besluit / mandaat application profiles). Nothing is derived at
runtime.
"""

from __future__ import annotations

# ── Prefix table ───────────────────────────────────────────────

DEFAULT_PREFIX_MAP: dict[str, str] = {
    "ext": "http://mu.semte.ch/vocabularies/ext/",
    "mu": "http://mu.semte.ch/vocabularies/core/",
    "muSession": "http://mu.semte.ch/vocabularies/session/",
    "tmp": "http://mu.semte.ch/vocabularies/tmp/",
    "besluit": "http://data.vlaanderen.be/ns/besluit#",
    "bv": "http://data.vlaanderen.be/ns/besluitvorming#",
    "mandaat": "http://data.vlaanderen.be/ns/mandaat#",
    "persoon": "http://data.vlaanderen.be/ns/persoon#",
    "generiek": "http://data.vlaanderen.be/ns/generiek#",
    "mobiliteit": "https://data.vlaanderen.be/ns/mobiliteit#",
    "publicationStatus": "http://mu.semte.ch/vocabularies/ext/signing/publication-status/",
    "eli": "http://data.europa.eu/eli/ontology#",
    "m8g": "http://data.europa.eu/m8g/",
    "dct": "http://purl.org/dc/terms/",
    "cpsv": "http://purl.org/vocab/cpsv#",
    "dul": "http://www.ontologydesignpatterns.org/ont/dul/DUL.owl#",
    "adms": "http://www.w3.org/ns/adms#",
    "person": "http://www.w3.org/ns/person#",
    "org": "http://www.w3.org/ns/org#",
    "prov": "http://www.w3.org/ns/prov#",
    "regorg": "https://www.w3.org/ns/regorg#",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "nao": "http://www.semanticdesktop.org/ontologies/2007/08/15/nao#",
    "pav": "http://purl.org/pav/",
    "schema": "http://schema.org/",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "sign": "http://mu.semte.ch/vocabularies/ext/signing/",
    "lblodlg": "http://data.lblod.info/vocabularies/leidinggevenden/",
    "lblodmow": "http://data.lblod.info/vocabularies/mobiliteit/",
    "locn": "http://www.w3.org/ns/locn#",
    "adres": "https://data.vlaanderen.be/ns/adres#",
    "notulen": "http://lblod.data.gift/vocabularies/notulen/",
    "nfo": "http://www.semanticdesktop.org/ontologies/2007/03/22/nfo#",
    "nie": "http://www.semanticdesktop.org/ontologies/2007/01/19/nie#",
    "dbpedia": "http://dbpedia.org/ontology/",
    "besluittype": "https://data.vlaanderen.be/id/concept/BesluitType/",
}

EXT = DEFAULT_PREFIX_MAP["ext"]
MU = DEFAULT_PREFIX_MAP["mu"]
BESLUIT = DEFAULT_PREFIX_MAP["besluit"]
ELI = DEFAULT_PREFIX_MAP["eli"]
DCT = DEFAULT_PREFIX_MAP["dct"]
PROV = DEFAULT_PREFIX_MAP["prov"]
SCHEMA = DEFAULT_PREFIX_MAP["schema"]
RDFS = DEFAULT_PREFIX_MAP["rdfs"]
XSD = DEFAULT_PREFIX_MAP["xsd"]

RDF_TYPE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"

# ── Datatypes ──────────────────────────────────────────────────

XSD_STRING = XSD + "string"
XSD_INTEGER = XSD + "integer"
XSD_BOOLEAN = XSD + "boolean"
XSD_DATE = XSD + "date"
XSD_DATETIME = XSD + "dateTime"
RDFS_RESOURCE = RDFS + "Resource"

# ── Classes ────────────────────────────────────────────────────

ZITTING = BESLUIT + "Zitting"
AGENDAPUNT = BESLUIT + "Agendapunt"
BEHANDELING_VAN_AGENDAPUNT = BESLUIT + "BehandelingVanAgendapunt"
BESLUIT_TYPE = BESLUIT + "Besluit"
STEMMING = BESLUIT + "Stemming"

AGENDA = EXT + "Agenda"
BESLUITENLIJST = EXT + "Besluitenlijst"
UITTREKSEL = EXT + "Uittreksel"
NOTULEN = EXT + "Notulen"

# ── Predicates ─────────────────────────────────────────────────

AANGEBRACHT_NA = BESLUIT + "aangebrachtNa"
GEBEURT_NA = BESLUIT + "gebeurtNa"
BEHANDELT = BESLUIT + "behandelt"
HEEFT_AGENDAPUNT = BESLUIT + "heeftAgendapunt"
HEEFT_NOTULEN = BESLUIT + "heeftNotulen"
IS_GEHOUDEN_DOOR = BESLUIT + "isGehoudenDoor"

PROV_GENERATED = PROV + "generated"
PROV_WAS_GENERATED_BY = PROV + "wasGeneratedBy"
PROV_WAS_DERIVED_FROM = PROV + "wasDerivedFrom"
PROV_VALUE = PROV + "value"
DCT_SUBJECT = DCT + "subject"
ELI_DATE_PUBLICATION = ELI + "date_publication"
ELI_PASSED_BY = ELI + "passed_by"
SCHEMA_POSITION = SCHEMA + "position"
MU_UUID = MU + "uuid"

EXT_AGENDA = EXT + "agenda"
EXT_AGENDA_AGENDAPUNT = EXT + "agendaAgendapunt"
EXT_UITTREKSEL = EXT + "uittreksel"
EXT_UITTREKSEL_BVAP = EXT + "uittrekselBvap"
EXT_BESLUITENLIJST = EXT + "besluitenlijst"
EXT_BESLUITENLIJST_BESLUIT = EXT + "besluitenlijstBesluit"

# Legacy predicate aliases, remapped before extraction.
PREDICATE_REMAP: dict[str, str] = {
    HEEFT_AGENDAPUNT: BEHANDELT,
}

# ── Publishing gates ───────────────────────────────────────────

PUBLISHES_AGENDA = EXT + "publishesAgenda"
PUBLISHES_BEHANDELING = EXT + "publishesBehandeling"
PUBLISHES_BESLUITENLIJST = EXT + "publishesBesluitenlijst"
PUBLISHES_NOTULEN = EXT + "publishesNotulen"

# ── Publication status bookkeeping ─────────────────────────────

_STATUS_BASE = EXT + "besluit-publicatie-publish-service/"
STATUS_PREDICATE = _STATUS_BASE + "status"
RETRIES_PREDICATE = _STATUS_BASE + "number-of-retries"
PENDING_STATUS = _STATUS_BASE + "status/pending"
FAILED_STATUS = _STATUS_BASE + "status/failed"
SUCCESS_STATUS = _STATUS_BASE + "status/success"

# ── Minted resource bases ──────────────────────────────────────

AGENDA_BASE = "http://data.lblod.info/id/lblod/agendas/"
UITTREKSEL_BASE = "http://data.lblod.info/id/lblod/uittreksels/"
BESLUITENLIJST_BASE = "http://data.lblod.info/id/lblod/besluitenlijsten/"
NOTULEN_BASE = "http://data.lblod.info/id/lblod/notulen/"
FILE_BASE = "http://lblod.data.gift/files/"
LOG_ENTRY_BASE = "http://data.lblod.info/id/log-entries/"
