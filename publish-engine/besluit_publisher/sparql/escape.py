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
"""SPARQL term escaping, driven by the profile ValueKind of a predicate."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from besluit_publisher.profiles import ValueKind
from besluit_publisher.vocabulary import XSD_BOOLEAN, XSD_DATE, XSD_DATETIME, XSD_INTEGER

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_uri(value: str) -> str:
    return "<" + re.sub(r'([\\"<>])', r"\\\1", value) + ">"


def escape_string(value: str) -> str:
    escaped = "".join(_STRING_ESCAPES.get(ch, ch) for ch in str(value))
    return f'"""{escaped}"""'


def escape_int(value: str | int) -> str:
    return f'"{int(value)}"^^<{XSD_INTEGER}>'


def escape_bool(value: str | bool) -> str:
    # snippets carry booleans as "true" / "false" text
    if isinstance(value, str):
        value = value.strip().lower() == "true"
    return f'"{"true" if value else "false"}"^^<{XSD_BOOLEAN}>'


def escape_date(value: str | date) -> str:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        value = value.isoformat()
    return f'"{date.fromisoformat(value[:10]).isoformat()}"^^<{XSD_DATE}>'


def escape_datetime(value: str | datetime) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    stamp = value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f'"{stamp}"^^<{XSD_DATETIME}>'


_ESCAPERS = {
    ValueKind.URI: escape_uri,
    ValueKind.TEXT: escape_string,
    ValueKind.DATE: escape_date,
    ValueKind.DATETIME: escape_datetime,
    ValueKind.INT: escape_int,
    ValueKind.BOOL: escape_bool,
}


def escape_object(value: str, kind: ValueKind) -> str:
    """Render ``value`` as a SPARQL term of the given kind.

    Raises ValueError when the value does not fit the kind.
    """
    return _ESCAPERS[kind](value)
