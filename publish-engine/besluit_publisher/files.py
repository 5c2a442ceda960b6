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

"""Share drive access: reads file-backed snippets, writes enriched documents.

``share://a/b.html`` names ``<share_dir>/a/b.html``.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from besluit_publisher.logger import get_logger
from besluit_publisher.result import Fail, FailureKind, Ok, Result
from besluit_publisher.sparql.queries import SparqlEndpoint, write_file_metadata

log = get_logger(__name__)

SHARE_SCHEME = "share://"


@dataclass(frozen=True, slots=True)
class StoredFile:
    uuid: str
    path: Path
    filename: str
    size: int


def share_path(reference: str, share_dir: Path) -> Path:
    if not reference.startswith(SHARE_SCHEME):
        raise ValueError(f"Not a share reference: {reference}")
    return share_dir / reference[len(SHARE_SCHEME):]


def share_uri(path: Path, share_dir: Path) -> str:
    return SHARE_SCHEME + path.relative_to(share_dir).as_posix()


def read_snippet(reference: str, share_dir: Path) -> Result[str]:
    """Content of the share file ``reference`` points at."""
    try:
        path = share_path(reference, share_dir)
        return Ok(data=path.read_text(encoding="utf-8"))
    except ValueError as exc:
        return Fail(error=str(exc), context=reference, kind=FailureKind.DATA)
    except OSError as exc:
        return Fail(error=f"Cannot read {reference}: {exc}", context=reference)


def persist_content_to_file(content: str, share_dir: Path, path_prefix: Sequence[str] = ()) -> Result[StoredFile]:
    """Write ``content`` to ``<share_dir>/<prefix...>/<uuid>.html``."""
    file_id = str(uuid.uuid4())
    filename = f"{file_id}.html"
    directory = share_dir.joinpath(*path_prefix)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        size = path.stat().st_size
    except OSError as exc:
        return Fail(error=f"Cannot write {filename}: {exc}", context=str(directory))

    log.debug("Wrote %s (%d bytes)", path, size)
    return Ok(data=StoredFile(uuid=file_id, path=path, filename=filename, size=size))


@dataclass(frozen=True)
class ShareFileStore:
    """The pipeline's FileStore: file on the share plus its metadata in the store."""

    endpoint: SparqlEndpoint
    graph: str
    share_dir: Path

    def write_document(self, content: str, path_prefix: Sequence[str]) -> Result[str]:
        stored = persist_content_to_file(content, self.share_dir, path_prefix)
        if not stored.ok:
            return stored

        return write_file_metadata(
            self.endpoint,
            self.graph,
            physical_uri=share_uri(stored.data.path, self.share_dir),
            physical_uuid=stored.data.uuid,
            filename=stored.data.filename,
            size=stored.data.size,
        )
