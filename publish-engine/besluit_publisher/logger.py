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

"""Structured logger with per-branch counters and final summary.

Collects success/fail counts per pipeline branch (session, agenda, ...)
and per publishing run so the publisher can print a summary at the end.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

_FMT = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger configured with a consistent format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FMT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


@dataclass
class StepCounter:
    """Tracks success/fail/skip counts for a single branch or step."""

    name: str
    ok: int = 0
    failed: int = 0
    skipped: int = 0


@dataclass
class PipelineSummary:
    """Accumulates counters across all branches of one or more runs."""

    steps: dict[str, StepCounter] = field(default_factory=dict)
    failures: list[tuple[str, str]] = field(default_factory=list)

    def counter(self, name: str) -> StepCounter:
        """Get or create a counter for a named step."""
        if name not in self.steps:
            self.steps[name] = StepCounter(name=name)
        return self.steps[name]

    def merge(self, other: PipelineSummary) -> None:
        """Add the counts of another summary into this one."""
        for step in other.steps.values():
            mine = self.counter(step.name)
            mine.ok += step.ok
            mine.failed += step.failed
            mine.skipped += step.skipped
        self.failures.extend(other.failures)

    def record_failure(self, resource: str, error: str) -> None:
        self.failures.append((resource, error))

    def report(self) -> str:
        """Format a human-readable summary block."""
        lines: list[str] = ["", "Publishing Summary", "=" * 40]
        for step in self.steps.values():
            parts = [f"{step.name}: {step.ok} ok"]
            if step.failed:
                parts.append(f"{step.failed} failed")
            if step.skipped:
                parts.append(f"{step.skipped} skipped")
            lines.append("  ".join(parts))
        if self.failures:
            lines.append("-" * 40)
            lines.extend(f"FAILED {resource}: {error}" for resource, error in self.failures)
        lines.append("=" * 40)
        return "\n".join(lines)
