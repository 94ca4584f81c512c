from __future__ import annotations

import logging
import threading
from datetime import date
from functools import lru_cache
from typing import Callable, List, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from lunarcal.core.config import LunarCalConfig, MAX_FILE_YEAR, MIN_FILE_YEAR
from lunarcal.core.converter import LunarConverter
from lunarcal.core.errors import DateNotFoundError, FileFormatError
from lunarcal.core.types import CalendarDate, DayRecord
from lunarcal.features.config import lunar_month_display_name, unknown_solar_term_names

router = APIRouter(prefix="/api/v1", tags=["public"])

log = logging.getLogger("lunarcal.api.public")

T = TypeVar("T")


# ============================================================
# Response Models
# ============================================================
class YMD(BaseModel):
    year: int
    month: int
    day: int


class DayResponse(BaseModel):
    solar: YMD
    lunar: YMD
    weekday: int = Field(description="0..6 (日曜=0)")
    weekday_raw: str
    solar_term: Optional[str] = None
    is_leap_month: bool = Field(default=False, description="閏月なら true")
    label: str = Field(description="農曆月名 (例: 正月, 閏四月)")


class SolarTermsResponse(BaseModel):
    year: int
    names: List[str] = Field(default_factory=list, description="指定された節氣名（空なら全件）")
    terms: List[DayResponse]


# ============================================================
# Converter (shared, serialized)
# ============================================================
class _SharedConverter:
    """
    One converter for the whole app. Requests run in a thread pool, so every
    call goes through the lock.
    """

    def __init__(self, converter: LunarConverter) -> None:
        self.converter = converter
        self._lock = threading.Lock()

    def call(self, fn: Callable[[LunarConverter], T]) -> T:
        with self._lock:
            return fn(self.converter)


@lru_cache(maxsize=1)
def get_shared_converter() -> _SharedConverter:
    """
    LUNARCAL_* 環境変数から設定を作り、アプリ起動中は使い回す。
    """
    return _SharedConverter(LunarConverter(config=LunarCalConfig.from_env()))


# ============================================================
# Helpers
# ============================================================
def _ymd(d: CalendarDate) -> YMD:
    return YMD(year=d.year, month=d.month, day=d.day)


def _day_response(r: DayRecord) -> DayResponse:
    return DayResponse(
        solar=_ymd(r.solar_date),
        lunar=_ymd(r.lunar_date),
        weekday=r.weekday,
        weekday_raw=r.weekday_raw,
        solar_term=r.solar_term or None,
        is_leap_month=r.is_leap_month,
        label=lunar_month_display_name(r.lunar_date.month, r.is_leap_month),
    )


def _parse_iso_date(s: str) -> date:
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid date format: {s} (expected YYYY-MM-DD)") from e


def _require_year_in_range(year: int) -> None:
    if not (MIN_FILE_YEAR <= year <= MAX_FILE_YEAR):
        raise HTTPException(
            status_code=422,
            detail=f"year out of range: {year} (supported {MIN_FILE_YEAR}..{MAX_FILE_YEAR})",
        )


def _run(shared: _SharedConverter, fn: Callable[[LunarConverter], T]) -> T:
    """
    Map converter errors to HTTP errors.
    """
    try:
        return shared.call(fn)
    except DateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"calendar file not available: {e}") from e
    except FileFormatError as e:
        log.exception("calendar file could not be parsed")
        raise HTTPException(status_code=502, detail=str(e)) from e
    except OSError as e:
        log.exception("calendar file could not be read")
        raise HTTPException(status_code=503, detail=f"calendar source unavailable: {e}") from e


# ============================================================
# Endpoints
# ============================================================
@router.get("/solar-to-lunar", response_model=DayResponse)
def solar_to_lunar(
    date_str: str = Query(..., alias="date", description="YYYY-MM-DD"),
    shared: _SharedConverter = Depends(get_shared_converter),
) -> DayResponse:
    d = _parse_iso_date(date_str)
    _require_year_in_range(d.year)
    r = _run(shared, lambda c: c.date_to_lunar_date(d))
    return _day_response(r)


@router.get("/lunar-to-solar", response_model=DayResponse)
def lunar_to_solar(
    year: int = Query(..., description="農曆年"),
    month: int = Query(..., ge=1, le=12),
    day: int = Query(..., ge=1, le=30),
    shared: _SharedConverter = Depends(get_shared_converter),
) -> DayResponse:
    _require_year_in_range(year)
    lunar = CalendarDate(year=year, month=month, day=day)
    r = _run(shared, lambda c: c.lunar_date_to_date(lunar))
    return _day_response(r)


@router.get("/solar-terms", response_model=SolarTermsResponse)
def solar_terms(
    year: int = Query(..., description="農曆年"),
    names: Optional[List[str]] = Query(None, alias="name", description="節氣名（複数可）"),
    shared: _SharedConverter = Depends(get_shared_converter),
) -> SolarTermsResponse:
    _require_year_in_range(year)
    # year+1 のファイルも読むので、その分も範囲チェック
    _require_year_in_range(year + 1)

    names = names or []
    unknown = unknown_solar_term_names(names)
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown solar term name(s): {', '.join(unknown)}")

    rows = _run(shared, lambda c: c.solar_terms(year, names))
    return SolarTermsResponse(year=year, names=list(names), terms=[_day_response(r) for r in rows])
