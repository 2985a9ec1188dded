"""Info endpoints — CRUD, count and bulk update.

Routes are declared explicitly; ``/infos/count`` precedes ``/infos/{info_id}``
so it is not captured as an id.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status

from todo_api.application.filter_parser import FilterParser
from todo_api.application.ports.info_repo import InfoRepository
from todo_api.application.use_cases.write_info import (
    CreateInfoUseCase,
    ReplaceInfoUseCase,
    UpdateAllInfosUseCase,
    UpdateInfoUseCase,
)
from todo_api.infrastructure.api.dependencies import (
    get_create_info_uc,
    get_filter_parser,
    get_info_repo,
    get_replace_info_uc,
    get_update_all_infos_uc,
    get_update_info_uc,
)
from todo_api.infrastructure.api.query_params import read_exploded_param
from todo_api.infrastructure.api.schemas import CountOut, InfoPatch, InfoReplace, NewInfo

router = APIRouter(prefix="/infos", tags=["infos"])

_FILTER_DOC = (
    "JSON filter object (where/order/limit/offset/skip/fields). "
    "The exploded form filter[limit]=2&filter[order][0]=title DESC is accepted too."
)
_WHERE_DOC = "JSON where object, or its exploded form where[isComplete]=false."

_NOT_FOUND = {404: {"description": "Info not found"}}


def _raw_param(request: Request, name: str, value: str | None) -> Any:
    return value if value is not None else read_exploded_param(request.query_params, name)


@router.post(
    "",
    summary="Create Info",
    responses={
        400: {"description": "Address not found"},
        422: {"description": "Invalid body"},
        502: {"description": "Geocoder unavailable"},
    },
)
async def create_info(payload: NewInfo, uc: CreateInfoUseCase = Depends(get_create_info_uc)):
    """Create a reminder; a remindAtAddress is geocoded into remindAtGeo first."""
    created = await uc.execute(payload.to_entity())
    return created.to_api()


@router.get("/count", response_model=CountOut, summary="Count Infos")
async def count_infos(
    request: Request,
    where: str | None = Query(None, description=_WHERE_DOC),
    repo: InfoRepository = Depends(get_info_repo),
    parser: FilterParser = Depends(get_filter_parser),
):
    clause = parser.parse_where(_raw_param(request, "where", where))
    return CountOut(count=await repo.count(clause))


@router.get("/{info_id}", summary="Get Info", responses=_NOT_FOUND)
async def find_info_by_id(
    info_id: int,
    request: Request,
    filter_: str | None = Query(None, alias="filter", description="Like the list filter, without where."),
    repo: InfoRepository = Depends(get_info_repo),
    parser: FilterParser = Depends(get_filter_parser),
):
    f = parser.parse_filter(_raw_param(request, "filter", filter_), allow_where=False)
    info = await repo.find_by_id(info_id, f.fields)
    return info.to_api()


@router.get("", summary="List Infos", responses={400: {"description": "Invalid filter"}})
async def find_infos(
    request: Request,
    filter_: str | None = Query(None, alias="filter", description=_FILTER_DOC),
    repo: InfoRepository = Depends(get_info_repo),
    parser: FilterParser = Depends(get_filter_parser),
):
    f = parser.parse_filter(_raw_param(request, "filter", filter_))
    return [info.to_api() for info in await repo.find(f)]


@router.put("/{info_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Replace Info", responses=_NOT_FOUND)
async def replace_info(
    info_id: int,
    payload: InfoReplace,
    uc: ReplaceInfoUseCase = Depends(get_replace_info_uc),
) -> None:
    await uc.execute(info_id, payload.to_entity())


@router.patch("/{info_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Update Info", responses=_NOT_FOUND)
async def update_info(
    info_id: int,
    payload: InfoPatch,
    uc: UpdateInfoUseCase = Depends(get_update_info_uc),
) -> None:
    await uc.execute(info_id, payload.to_changes())


@router.delete("/{info_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Info", responses=_NOT_FOUND)
async def delete_info(info_id: int, repo: InfoRepository = Depends(get_info_repo)) -> None:
    await repo.delete_by_id(info_id)


@router.patch("", response_model=CountOut, summary="Bulk update Infos")
async def update_all_infos(
    payload: InfoPatch,
    request: Request,
    where: str | None = Query(None, description=_WHERE_DOC),
    uc: UpdateAllInfosUseCase = Depends(get_update_all_infos_uc),
    parser: FilterParser = Depends(get_filter_parser),
):
    clause = parser.parse_where(_raw_param(request, "where", where))
    return CountOut(count=await uc.execute(payload.to_changes(), clause))
