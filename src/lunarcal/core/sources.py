# src/lunarcal/core/sources.py
from __future__ import annotations

import io
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import ContextManager, Iterable, Iterator, Optional, Protocol, runtime_checkable

import httpx

from .config import SourceConfig
from .errors import FileSourceError

log = logging.getLogger(__name__)


@runtime_checkable
class FileSource(Protocol):
    """
    Supplies the text of one file-year.

    open() is a context manager yielding text lines; the stream is released
    when the block exits. A missing year raises FileNotFoundError.
    """
    def open(self, file_year: int) -> ContextManager[Iterable[str]]: ...


# ============================================================
# Local directory
# ============================================================

@dataclass(frozen=True)
class DirectorySource:
    """
    Reads {directory}/T{year}c.txt (UTF-8 after conversion from Big5).
    """
    directory: Path
    filename_pattern: str = "T{year}c.txt"
    encoding: str = "utf-8"

    def path_for(self, file_year: int) -> Path:
        return Path(self.directory) / self.filename_pattern.format(year=int(file_year))

    @contextmanager
    def open(self, file_year: int) -> Iterator[Iterable[str]]:
        p = self.path_for(file_year)
        log.debug("opening calendar file: %s", p)
        with p.open("r", encoding=self.encoding) as f:
            yield f


# ============================================================
# Observatory HTTP download
# ============================================================

@dataclass
class HttpSource:
    """
    Downloads {base_url}/T{year}c.txt.

    The published files are Big5; undecodable bytes are dropped (iconv -c).
    With cache_dir set, the decoded text is written there as UTF-8 once the
    caller has read it without error, and later opens read the local copy.
    A failed write only logs a warning.
    """
    base_url: str
    timeout_seconds: float = 30.0
    filename_pattern: str = "T{year}c.txt"
    encoding: str = "big5"
    cache_dir: Optional[Path] = None
    client: Optional[httpx.Client] = field(default=None, repr=False)

    def url_for(self, file_year: int) -> str:
        return f"{self.base_url.rstrip('/')}/{self.filename_pattern.format(year=int(file_year))}"

    def _local(self) -> Optional[DirectorySource]:
        if self.cache_dir is None:
            return None
        return DirectorySource(directory=Path(self.cache_dir), filename_pattern=self.filename_pattern)

    def fetch_text(self, file_year: int) -> str:
        url = self.url_for(file_year)
        log.info("downloading calendar file: %s", url)
        try:
            if self.client is not None:
                resp = self.client.get(url, timeout=self.timeout_seconds)
            else:
                with httpx.Client(timeout=self.timeout_seconds, follow_redirects=True) as client:
                    resp = client.get(url)
        except httpx.HTTPError as e:
            log.warning("download failed: %s (%s)", url, e)
            raise FileSourceError(f"failed to download {url}: {e}") from e

        if resp.status_code == 404:
            raise FileNotFoundError(f"calendar file not published: {url}")
        if resp.status_code != 200:
            log.warning("download failed: %s status=%s", url, resp.status_code)
            raise FileSourceError(f"failed to download {url}: HTTP {resp.status_code}")

        return resp.content.decode(self.encoding, errors="ignore")

    @contextmanager
    def open(self, file_year: int) -> Iterator[Iterable[str]]:
        local = self._local()
        if local is not None and local.path_for(file_year).exists():
            with local.open(file_year) as f:
                yield f
            return

        text = self.fetch_text(file_year)
        with io.StringIO(text) as f:
            yield f

        # reached only when the caller's block finished (i.e. the text scanned cleanly)
        if local is not None:
            self._save(local.path_for(file_year), text, local.encoding)

    def _save(self, p: Path, text: str, encoding: str) -> None:
        tmp = p.with_name(p.name + ".part")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding=encoding)
            os.replace(tmp, p)
        except OSError as e:
            log.warning("could not save calendar file: %s (%s)", p, e)
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                pass
            return
        log.info("saved calendar file: %s", p)


def source_from_config(config: SourceConfig) -> FileSource:
    if config.source_url:
        return HttpSource(
            base_url=config.source_url,
            timeout_seconds=config.timeout_seconds,
            filename_pattern=config.filename_pattern,
            encoding=config.remote_encoding,
            cache_dir=config.files_dir,
        )
    return DirectorySource(
        directory=config.files_dir,
        filename_pattern=config.filename_pattern,
        encoding=config.encoding,
    )
