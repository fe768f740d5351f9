"""Module B: Thai provinces."""
from sqlalchemy import Column, Integer, String, Float, Enum as SQLEnum
from campsite_api.database import Base
import enum


class Region(str, enum.Enum):
    central = "central"
    north = "north"
    northeast = "northeast"
    east = "east"
    west = "west"
    south = "south"


class Province(Base):
    __tablename__ = "provinces"

    id = Column(Integer, primary_key=True, index=True)
    name_th = Column(String(100), nullable=False)
    name_en = Column(String(100), nullable=False, index=True)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    region = Column(SQLEnum(Region), nullable=False)
