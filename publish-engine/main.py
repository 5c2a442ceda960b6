# SPDX-License-Identifier: MIT
"""
█████╗ ██████╗  █████╗ ███████╗
██╔══██╗██╔══██╗██╔══██╗██╔════╝
███████║██████╔╝███████║███████╗
██╔══██║██╔══██╗██╔══██║╚════██║
██║  ██║██║  ██║██║  ██║███████║
╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>

Licensed under the MIT License.
See LICENSE and THIRD_PARTY_LICENSES for details.

Besluit Publisher - Publish Engine

Reads sign:PublishedResource snippets from the search graph, flattens
their RDFa, and writes sessions, agendas, decision lists, extracts and
minutes as linked data into the public graph.

Pipeline: Fetch -> Lock -> Flatten -> Branches -> Status

Usage: python main.py --config=../service.yaml [--watch]
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from besluit_publisher.config import load_config
from besluit_publisher.logger import get_logger
from besluit_publisher.publisher import run_publishing
from besluit_publisher.sparql.client import SparqlClient

log = get_logger("main")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="besluit-publisher",
        description="Publish RDFa meeting snippets as linked data",
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to service YAML (e.g. ../service.yaml)",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep polling every publishing.interval_seconds instead of one pass",
    )
    args = parser.parse_args(argv)

    cfg_result = load_config(args.config.resolve())
    if not cfg_result.ok:
        log.error(cfg_result.error)
        return 1
    config = cfg_result.data

    client = SparqlClient(config.sparql)
    log.info("Search graph: %s", config.graphs.search)
    log.info("Public graph: %s", config.graphs.public)

    while True:
        result = run_publishing(config, client)
        if not result.ok and not args.watch:
            log.error("Publishing failed: %s", result.error)
            return 1
        if not args.watch:
            return 0
        if not result.ok:
            log.error("Publishing pass failed: %s", result.error)
        time.sleep(config.publishing.interval_seconds)


if __name__ == "__main__":
    sys.exit(main())
