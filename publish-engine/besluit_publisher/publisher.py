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

"""One publishing pass over the search graph.

  1. Fetch     unprocessed published resources (oldest, least retried first)
  2. Lock      status pending, retry counter bumped
  3. Publish   run the pipeline per resource
  4. Status    success, or failed plus an rlog entry

A resource whose data is broken is marked failed with its retry counter at
``max_attempts`` so it is not picked up again. Store failures stay retryable.
"""

from __future__ import annotations

from besluit_publisher.config import ServiceConfig
from besluit_publisher.files import ShareFileStore, read_snippet
from besluit_publisher.logger import PipelineSummary, get_logger
from besluit_publisher.pipeline import PublishedResource, RunReport, run_pipeline
from besluit_publisher.result import Fail, FailureKind, Ok, Result
from besluit_publisher.sparql.logs import save_log
from besluit_publisher.sparql.queries import (
    SparqlEndpoint,
    SparqlStore,
    get_unprocessed_published_resources,
    update_status,
)
from besluit_publisher.vocabulary import FAILED_STATUS, PENDING_STATUS, SUCCESS_STATUS

log = get_logger(__name__)


def _lock(client: SparqlEndpoint, resources: list[PublishedResource]) -> list[PublishedResource]:
    """Mark resources pending; those that cannot be locked are left for a later pass."""
    locked: list[PublishedResource] = []
    for item in resources:
        log.info("Locking %s", item.resource)
        result = update_status(client, item, PENDING_STATUS, item.number_of_retries)
        if not result.ok:
            log.error("Could not lock %s: %s", item.resource, result.error)
            continue
        item.number_of_retries += 1
        locked.append(item)
    return locked


def _load_snippet(item: PublishedResource, config: ServiceConfig) -> Result[PublishedResource]:
    if item.rdfa_snippet or not item.file_path:
        return Ok(data=item)
    content = read_snippet(item.file_path, config.files.share_dir)
    if not content.ok:
        return content
    item.rdfa_snippet = content.data
    return Ok(data=item)


def _publish_one(
    item: PublishedResource,
    config: ServiceConfig,
    store: SparqlStore,
    files: ShareFileStore,
) -> Result[RunReport]:
    loaded = _load_snippet(item, config)
    if not loaded.ok:
        return loaded
    return run_pipeline(
        loaded.data,
        store,
        files,
        base_iri=config.rdfa.base_iri,
        minutes_dir=config.files.minutes_dir,
        fail_fast=config.publishing.fail_fast,
    )


def _record_failure(client: SparqlEndpoint, config: ServiceConfig, item: PublishedResource, failure: Fail) -> None:
    attempts = (
        config.publishing.max_attempts
        if failure.kind is FailureKind.DATA
        else item.number_of_retries
    )
    status = update_status(client, item, FAILED_STATUS, attempts)
    if not status.ok:
        log.error("Could not mark %s failed: %s", item.resource, status.error)

    saved = save_log(
        client,
        config.graphs.logs,
        f"Publishing {item.resource} failed: {failure.error}",
        {"resource": item.resource, "kind": failure.kind.value, "attempts": attempts},
    )
    if not saved.ok:
        log.warning("Could not save log entry for %s: %s", item.resource, saved.error)


def run_publishing(config: ServiceConfig, client: SparqlEndpoint) -> Result[PipelineSummary]:
    """Publish everything pending in the search graph. Fails only when the fetch fails."""
    summary = PipelineSummary()
    counter = summary.counter("resources")

    found = get_unprocessed_published_resources(
        client,
        config.graphs.search,
        config.publishing.pending_timeout_hours,
        config.publishing.max_attempts,
    )
    if not found.ok:
        log.error("Fetching unprocessed resources failed: %s", found.error)
        return found
    log.info("Found %d resources to process", len(found.data))

    store = SparqlStore(endpoint=client, graph=config.graphs.public)
    files = ShareFileStore(endpoint=client, graph=config.graphs.public, share_dir=config.files.share_dir)

    for item in _lock(client, found.data):
        log.info("Start processing: %s", item.resource)
        result = _publish_one(item, config, store, files)

        if result.ok:
            summary.merge(result.data.summary)
            status = update_status(client, item, SUCCESS_STATUS, item.number_of_retries)
            if not status.ok:
                log.error("Could not mark %s published: %s", item.resource, status.error)
            counter.ok += 1
            continue

        if isinstance(result.context, RunReport):
            summary.merge(result.context.summary)
        log.error("Error processing %s (%s): %s", item.resource, result.kind.value, result.error)
        _record_failure(client, config, item, result)
        summary.record_failure(item.resource, result.error)
        counter.failed += 1

    log.info(summary.report())
    return Ok(data=summary)
