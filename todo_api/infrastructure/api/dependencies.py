"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.adapters.geocoder.census_adapter import CensusGeocoderAdapter
from todo_api.adapters.persistence.database import get_session
from todo_api.adapters.persistence.memory import InMemoryInfoRepository
from todo_api.adapters.persistence.repositories import SqlInfoRepository
from todo_api.application.filter_parser import FilterParser
from todo_api.application.ports.geocoder_port import GeocoderPort
from todo_api.application.ports.info_repo import InfoRepository
from todo_api.application.use_cases.write_info import (
    CreateInfoUseCase,
    ReplaceInfoUseCase,
    UpdateAllInfosUseCase,
    UpdateInfoUseCase,
)
from todo_api.config import settings

logger = logging.getLogger(__name__)

# Singleton adapters (stateless or with internal caching)
_geocoder_adapter = CensusGeocoderAdapter()
_filter_parser = FilterParser(prohibited_keys=settings.prohibited_filter_keys)
_memory_repo = InMemoryInfoRepository()


def get_geocoder() -> GeocoderPort:
    return _geocoder_adapter


def get_filter_parser() -> FilterParser:
    return _filter_parser


def _memory_info_repo() -> InfoRepository:
    return _memory_repo


def _sql_info_repo(session: AsyncSession = Depends(get_session)) -> InfoRepository:
    return SqlInfoRepository(session)


# Storage backend is chosen once, at import time, from PERSISTENCE_BACKEND.
if settings.uses_sql_backend:
    get_info_repo = _sql_info_repo
    logger.info("Using SQL storage backend")
else:
    get_info_repo = _memory_info_repo
    logger.info("Using in-memory storage backend")


def get_create_info_uc(
    repo: InfoRepository = Depends(get_info_repo),
    geocoder: GeocoderPort = Depends(get_geocoder),
) -> CreateInfoUseCase:
    return CreateInfoUseCase(geocoder=geocoder, info_repo=repo)


def get_replace_info_uc(
    repo: InfoRepository = Depends(get_info_repo),
    geocoder: GeocoderPort = Depends(get_geocoder),
) -> ReplaceInfoUseCase:
    return ReplaceInfoUseCase(geocoder=geocoder, info_repo=repo)


def get_update_info_uc(
    repo: InfoRepository = Depends(get_info_repo),
    geocoder: GeocoderPort = Depends(get_geocoder),
) -> UpdateInfoUseCase:
    return UpdateInfoUseCase(geocoder=geocoder, info_repo=repo)


def get_update_all_infos_uc(
    repo: InfoRepository = Depends(get_info_repo),
    geocoder: GeocoderPort = Depends(get_geocoder),
) -> UpdateAllInfosUseCase:
    return UpdateAllInfosUseCase(geocoder=geocoder, info_repo=repo)
