from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class VoterRecord(BaseModel):
    """One polling-roll row, serialized with the roll export's field names"""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(alias="_id")
    ac_no: int = Field(alias="acNo")
    part_no: int = Field(alias="partNo")
    sl_no_in_part: int = Field(alias="slNoInPart")
    house_no: Optional[str] = Field(default=None, alias="houseNo")
    section_no: Optional[str] = Field(default=None, alias="sectionNo")
    fm_name_v2: Optional[str] = Field(default=None, alias="fmNameV2")
    rln_fm_nm_v2: Optional[str] = Field(default=None, alias="rlnFmNmV2")
    rln_type: Optional[str] = Field(default=None, alias="rlnType")
    age: Optional[int] = None
    sex: Optional[str] = None
    id_card_no: Optional[str] = Field(default=None, alias="idCardNo")
    ps_name: Optional[str] = Field(default=None, alias="psName")


class NeighborWindowResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: List[VoterRecord]
    selected_sl_no: int = Field(alias="selectedSlNo")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
