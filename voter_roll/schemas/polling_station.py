from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class PollingStation(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    ac_no: int = Field(alias="acNo")
    part_no: int = Field(alias="partNo")
    part_name_v1: Optional[str] = Field(default=None, alias="partNameV1")
    part_name_tn: Optional[str] = Field(default=None, alias="partNameTn")
    locality_v1: Optional[str] = Field(default=None, alias="localityV1")
    locality_tn: Optional[str] = Field(default=None, alias="localityTn")


class PollingStationListResponse(BaseModel):
    success: bool = True
    data: List[PollingStation]
