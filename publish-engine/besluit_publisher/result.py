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

"""Result pattern for error handling without exceptions.

Provides Ok[T] and Fail types as an alternative to raising exceptions.
Every function that can fail returns Result[T] = Ok[T] | Fail.

A Fail is tagged with a FailureKind so the publisher can tell malformed
input (DATA, never retried) from store or IO trouble (STORE, retried).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    DATA = "data"
    STORE = "store"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying typed data."""

    data: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class Fail:
    """Failed result carrying error message, failure kind and optional context."""

    error: str
    context: Any = None
    kind: FailureKind = FailureKind.STORE
    ok: bool = field(default=False, init=False)

    @property
    def retryable(self) -> bool:
        return self.kind is FailureKind.STORE


Result = Ok[T] | Fail
