from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select
from voter_roll.database import get_db
from voter_roll.middleware.api_key import verify_api_key
from voter_roll.models.api_key import ApiKey
from voter_roll.models.legacy_part import LegacyPart2025
from voter_roll.schemas.polling_station import PollingStation, PollingStationListResponse
from voter_roll.schemas.voter import ErrorResponse
from voter_roll.api.v1.voters import error_response
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/polling-stations-2025",
    response_model=PollingStationListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_polling_stations(
    db: AsyncSession = Depends(get_db),
    api_key: ApiKey = Depends(verify_api_key)
):
    """List all 2025 polling stations across constituencies"""
    try:
        result = await db.execute(
            select(LegacyPart2025).order_by(LegacyPart2025.ac_no, LegacyPart2025.part_no, LegacyPart2025.id)
        )
        stations = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception("Polling stations 2025 fetch error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"An error occurred while fetching polling stations: {e.__class__.__name__}"
        )

    return PollingStationListResponse(data=[PollingStation.model_validate(station) for station in stations])
