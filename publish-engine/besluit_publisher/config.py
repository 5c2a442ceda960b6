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

"""Loads service.yaml into typed dataclasses.

Pure loader, no domain logic. Optional keys fall back to the defaults
the service has always run with.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from besluit_publisher.rdfa import DEFAULT_BASE_IRI
from besluit_publisher.result import Fail, FailureKind, Ok, Result


# ── SPARQL ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class SparqlConfig:
    endpoint: str
    update_endpoint: str
    timeout: int
    sudo: bool


# ── Graphs ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class GraphConfig:
    search: str
    public: str
    logs: str


# ── Publishing ─────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class PublishingConfig:
    """Retry bookkeeping and branch failure policy."""
    pending_timeout_hours: float
    max_attempts: int
    interval_seconds: int
    fail_fast: bool


# ── RDFa / files ───────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class RdfaConfig:
    base_iri: str


@dataclass(frozen=True, slots=True)
class FilesConfig:
    share_dir: Path
    minutes_dir: str


# ── Top-level ──────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ServiceConfig:
    sparql: SparqlConfig
    graphs: GraphConfig
    publishing: PublishingConfig
    rdfa: RdfaConfig
    files: FilesConfig


# ── Loader ─────────────────────────────────────────────────────

def _build_sparql(raw: dict[str, Any]) -> SparqlConfig:
    return SparqlConfig(
        endpoint=raw["endpoint"],
        update_endpoint=raw.get("update_endpoint") or raw["endpoint"],
        timeout=int(raw.get("timeout", 60)),
        sudo=bool(raw.get("sudo", True)),
    )


def _build_graphs(raw: dict[str, Any]) -> GraphConfig:
    return GraphConfig(
        search=raw.get("search", "http://mu.semte.ch/graphs/public"),
        public=raw.get("public", "http://mu.semte.ch/graphs/public"),
        logs=raw.get("logs", "http://mu.semte.ch/graphs/logs"),
    )


def _build_publishing(raw: dict[str, Any]) -> PublishingConfig:
    return PublishingConfig(
        pending_timeout_hours=float(raw.get("pending_timeout_hours", 3)),
        max_attempts=int(raw.get("max_attempts", 10)),
        interval_seconds=int(raw.get("interval_seconds", 300)),
        fail_fast=bool(raw.get("fail_fast", False)),
    )


def _build_files(raw: dict[str, Any]) -> FilesConfig:
    return FilesConfig(
        share_dir=Path(raw.get("share_dir", "/share")),
        minutes_dir=raw.get("minutes_dir", "enriched-notulen"),
    )


def load_config(path: Path) -> Result[ServiceConfig]:
    """Load service.yaml into ServiceConfig. No validation beyond structure."""
    if not path.exists():
        return Fail(error=f"Config file not found: {path}", kind=FailureKind.DATA)

    try:
        raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        return Fail(error=f"YAML parse error: {exc}", context=str(path), kind=FailureKind.DATA)

    try:
        config = ServiceConfig(
            sparql=_build_sparql(raw["sparql"]),
            graphs=_build_graphs(raw.get("graphs") or {}),
            publishing=_build_publishing(raw.get("publishing") or {}),
            rdfa=RdfaConfig(base_iri=(raw.get("rdfa") or {}).get("base_iri", DEFAULT_BASE_IRI)),
            files=_build_files(raw.get("files") or {}),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        return Fail(error=f"Config structure error: {exc}", context=str(path), kind=FailureKind.DATA)

    return Ok(data=config)
