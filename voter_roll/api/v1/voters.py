from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, Tuple, Type
from voter_roll.config import get_settings
from voter_roll.database import get_db
from voter_roll.core.exceptions import ValidationError
from voter_roll.core.neighbors import NeighborResolver
from voter_roll.core.partitions import resolve_partition
from voter_roll.middleware.api_key import verify_api_key
from voter_roll.models.api_key import ApiKey
from voter_roll.models.voter import VoterRoll
from voter_roll.schemas.voter import NeighborWindowResponse, ErrorResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def parse_neighbor_params(
    tsc: Optional[str],
    part_no: Optional[str],
    sl_no_in_part: Optional[str],
) -> Tuple[Type[VoterRoll], int, int]:
    """
    Validate the neighbor query parameters without touching storage
    Returns: (partition model, part number, serial number)
    """
    if not part_no or not part_no.strip() or not sl_no_in_part or not sl_no_in_part.strip():
        raise ValidationError("partNo and slNoInPart are required")

    partition = resolve_partition(tsc)

    try:
        part_number = int(part_no)
        sl_number = int(sl_no_in_part)
    except ValueError:
        raise ValidationError("partNo and slNoInPart must be integers")

    return partition, part_number, sl_number


@router.get(
    "/voters/neighbors",
    response_model=NeighborWindowResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_neighbor_voters(
    tsc: Optional[str] = Query(None, description="Constituency identifier, defaults to the general roll"),
    part_no: Optional[str] = Query(None, alias="partNo"),
    sl_no_in_part: Optional[str] = Query(None, alias="slNoInPart"),
    db: AsyncSession = Depends(get_db),
    api_key: ApiKey = Depends(verify_api_key)
):
    """Get the voters printed around a selected voter on the same part of the roll"""
    settings = get_settings()

    try:
        partition, part_number, sl_number = parse_neighbor_params(tsc, part_no, sl_no_in_part)
    except ValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        resolver = NeighborResolver(db)
        window = await resolver.find_neighbors(
            partition, part_number, sl_number, radius=settings.NEIGHBOR_RADIUS
        )
    except Exception as e:
        logger.exception(f"Neighbors search error for key {api_key.id}: {e}")
        try:
            await db.rollback()
        except SQLAlchemyError as rollback_error:
            logger.error(f"Rollback after neighbors search error failed: {rollback_error}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(e) or "An error occurred while fetching neighbors"
        )

    return NeighborWindowResponse(data=list(window.records), selected_sl_no=window.selected_sl_no)
