from sqlalchemy import Column, String, Integer, Index
from sqlalchemy.orm import declared_attr
from voter_roll.database import Base


class LegacyPartMixin:
    """Per-part reference data: polling station and locality names in two languages"""

    id = Column(Integer, primary_key=True, autoincrement=True)
    ac_no = Column("acNo", Integer, nullable=False)
    part_no = Column("partNo", Integer, nullable=False)
    part_name_v1 = Column("partNameV1", String, nullable=True)  # station name, primary language
    part_name_tn = Column("partNameTn", String, nullable=True)
    locality_v1 = Column("localityV1", String, nullable=True)
    locality_tn = Column("localityTn", String, nullable=True)

    @declared_attr
    def __table_args__(cls):
        # Not unique: the reference export may repeat a part, lowest id wins
        return (Index(f"ix_{cls.__tablename__}_ac_part", "acNo", "partNo"),)


class LegacyPart(LegacyPartMixin, Base):
    __tablename__ = "legacyparts"


class LegacyPart2025(LegacyPartMixin, Base):
    __tablename__ = "legacyparts_2025"
