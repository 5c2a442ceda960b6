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
"""Publishing failures as rlog:Entry resources in the logs graph."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

from besluit_publisher.result import Result
from besluit_publisher.sparql.escape import escape_datetime, escape_string, escape_uri
from besluit_publisher.sparql.queries import SparqlEndpoint
from besluit_publisher.vocabulary import LOG_ENTRY_BASE, MU_UUID

SERVICE_SOURCE = "https://github.com/lblod/besluit-publicatie-publish-service"
ERROR_LEVEL = "http://data.lblod.info/id/log-levels/3af9ebe1-e6a8-495c-a392-16ced1f38ef1"
PUBLISHED_RESOURCE_CLASS = "http://mu.semte.ch/vocabularies/ext/signing/PublishedResource"


def log_entry_query(
    graph: str,
    entry_uuid: str,
    class_name: str,
    message: str,
    details: dict[str, Any],
    date: datetime,
) -> str:
    entry = f"{LOG_ENTRY_BASE}{entry_uuid}"
    return f"""
    PREFIX rlog: <http://persistence.uni-leipzig.org/nlp2rdf/ontologies/rlog#>
    PREFIX dct: <http://purl.org/dc/terms/>
    PREFIX ext: <http://mu.semte.ch/vocabularies/ext/>
    INSERT DATA {{
      GRAPH {escape_uri(graph)} {{
        {escape_uri(entry)} a rlog:Entry ;
            {escape_uri(MU_UUID)} {escape_string(entry_uuid)} ;
            dct:source {escape_uri(SERVICE_SOURCE)} ;
            rlog:className {escape_uri(class_name)} ;
            rlog:message {escape_string(message)} ;
            rlog:date {escape_datetime(date)} ;
            rlog:level {escape_uri(ERROR_LEVEL)} ;
            ext:specificInformation {escape_string(json.dumps(details, default=str))} .
      }}
    }}
    """


def save_log(
    endpoint: SparqlEndpoint,
    graph: str,
    message: str,
    details: dict[str, Any],
    class_name: str = PUBLISHED_RESOURCE_CLASS,
) -> Result[None]:
    query = log_entry_query(graph, str(uuid.uuid4()), class_name, message, details, datetime.now(timezone.utc))
    return endpoint.update(query)
