from sqlalchemy import Column, String, Integer, Index, UniqueConstraint
from sqlalchemy.orm import declared_attr
from voter_roll.database import Base
import uuid


class VoterRollMixin:
    """Columns shared by every polling-roll partition table.

    Column names follow the roll-management export (camelCase); attribute
    names are the snake_case equivalents.
    """

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    ac_no = Column("acNo", Integer, nullable=False)
    part_no = Column("partNo", Integer, nullable=False)
    sl_no_in_part = Column("slNoInPart", Integer, nullable=False)
    house_no = Column("houseNo", String, nullable=True)
    section_no = Column("sectionNo", String, nullable=True)
    fm_name_v2 = Column("fmNameV2", String, nullable=True)
    rln_fm_nm_v2 = Column("rlnFmNmV2", String, nullable=True)
    rln_type = Column("rlnType", String, nullable=True)
    age = Column(Integer, nullable=True)
    sex = Column(String, nullable=True)
    id_card_no = Column("idCardNo", String, nullable=True, index=True)
    ps_name = Column("psName", String, nullable=True)

    @declared_attr
    def __table_args__(cls):
        return (
            UniqueConstraint("acNo", "partNo", "slNoInPart", name=f"uq_{cls.__tablename__}_roll_position"),
            Index(f"ix_{cls.__tablename__}_part_serial", "partNo", "slNoInPart"),
        )


# Used in type hints for any partition model
VoterRoll = VoterRollMixin


def voter_roll_model(class_name: str, table_name: str) -> type:
    """Create the mapped class for one polling-roll partition table"""
    return type(class_name, (VoterRollMixin, Base), {"__tablename__": table_name})


# General partition used when no constituency is given
Voter = voter_roll_model("Voter", "voters")
