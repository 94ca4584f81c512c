# src/lunarcal/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

# Observatory tables cover 1901..2100
MIN_FILE_YEAR = 1901
MAX_FILE_YEAR = 2100

DEFAULT_SOURCE_URL = "https://www.hko.gov.hk/tc/gts/time/calendar/text/files"

ENV_FILES_DIR = "LUNARCAL_FILES_DIR"
ENV_SOURCE_URL = "LUNARCAL_SOURCE_URL"
ENV_TIMEOUT = "LUNARCAL_TIMEOUT"


def _project_data_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "data" / "files"


@dataclass(frozen=True)
class SourceConfig:
    """
    Where the per-year text files come from.

    source_url=None => read files_dir only.
    source_url set  => download missing years (remote files are Big5) and,
                       when files_dir is writable, keep a UTF-8 copy there.
    """
    files_dir: Path = field(default_factory=_project_data_dir)
    filename_pattern: str = "T{year}c.txt"
    encoding: str = "utf-8"

    source_url: Optional[str] = None
    remote_encoding: str = "big5"
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class ParseConfig:
    header_lines: int = 3

    # file-year <= cutoff: 2010年01月02日 (zero-padded), later: 2011年1月2日
    zero_pad_cutoff_year: int = 2010


@dataclass(frozen=True)
class LunarCalConfig:
    source: SourceConfig = field(default_factory=SourceConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)

    @classmethod
    def from_env(cls) -> "LunarCalConfig":
        """
        LUNARCAL_FILES_DIR / LUNARCAL_SOURCE_URL / LUNARCAL_TIMEOUT を反映した設定を返す。
        """
        kwargs = {}

        files_dir = os.environ.get(ENV_FILES_DIR, "").strip()
        if files_dir:
            kwargs["files_dir"] = Path(files_dir).expanduser()

        url = os.environ.get(ENV_SOURCE_URL, "").strip()
        if url:
            kwargs["source_url"] = url

        timeout = os.environ.get(ENV_TIMEOUT, "").strip()
        if timeout:
            try:
                kwargs["timeout_seconds"] = float(timeout)
            except ValueError as e:
                raise ValueError(f"{ENV_TIMEOUT} must be a number (got {timeout!r})") from e

        return cls(source=SourceConfig(**kwargs))
