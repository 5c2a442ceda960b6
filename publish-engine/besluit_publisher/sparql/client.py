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
"""Generic SPARQL HTTP client using urllib.

Sends POST requests to a SPARQL endpoint: queries return parsed JSON
bindings, updates return nothing. No domain logic, pure transport layer.
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

import certifi

from besluit_publisher.config import SparqlConfig
from besluit_publisher.logger import get_logger
from besluit_publisher.result import Fail, Ok, Result

log = get_logger(__name__)

Binding = dict[str, dict[str, str]]

_ssl_ctx = ssl.create_default_context(cafile=certifi.where())


def _post(
    endpoint: str,
    form: dict[str, str],
    timeout: int,
    headers: dict[str, str],
) -> Result[bytes]:
    encoded_body = urllib.parse.urlencode(form).encode("utf-8")

    req = urllib.request.Request(
        endpoint,
        data=encoded_body,
        headers={"Content-Type": "application/x-www-form-urlencoded", **headers},
        method="POST",
    )

    log.debug("SPARQL request → %s (%d bytes)", endpoint, len(encoded_body))

    try:
        with urllib.request.urlopen(req, timeout=timeout, context=_ssl_ctx) as resp:
            return Ok(data=resp.read())
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")[:500]
        return Fail(
            error=f"SPARQL HTTP {exc.code}: {exc.reason}",
            context=body,
        )
    except urllib.error.URLError as exc:
        return Fail(error=f"SPARQL connection error: {exc.reason}")
    except TimeoutError:
        return Fail(error=f"SPARQL timeout after {timeout}s")


def execute_query(
    endpoint: str,
    query: str,
    timeout: int = 30,
    headers: dict[str, str] | None = None,
) -> Result[list[Binding]]:
    """POST a SPARQL query and return the parsed result bindings."""
    result = _post(
        endpoint,
        {"query": query},
        timeout,
        {"Accept": "application/sparql-results+json", **(headers or {})},
    )
    if not result.ok:
        return result

    try:
        raw: dict[str, Any] = json.loads(result.data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return Fail(error=f"SPARQL response is not JSON: {exc}", context=result.data[:500])

    bindings: list[Binding] = raw.get("results", {}).get("bindings", [])
    log.debug("SPARQL returned %d bindings", len(bindings))
    return Ok(data=bindings)


def execute_update(
    endpoint: str,
    update: str,
    timeout: int = 30,
    headers: dict[str, str] | None = None,
) -> Result[None]:
    """POST a SPARQL update."""
    result = _post(endpoint, {"update": update}, timeout, headers or {})
    if not result.ok:
        return result
    return Ok(data=None)


@dataclass(frozen=True)
class SparqlClient:
    """Binds the transport functions to one configured endpoint pair."""

    config: SparqlConfig

    @property
    def _headers(self) -> dict[str, str]:
        return {"mu-auth-sudo": "true"} if self.config.sudo else {}

    def query(self, query: str) -> Result[list[Binding]]:
        return execute_query(self.config.endpoint, query, self.config.timeout, self._headers)

    def update(self, update: str) -> Result[None]:
        return execute_update(self.config.update_endpoint, update, self.config.timeout, self._headers)
