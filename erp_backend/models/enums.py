"""
SQLAlchemy Enum definitions
"""
import enum


class HolidayTypeEnum(str, enum.Enum):
    GAZETTED = "Gazetted"
    RESTRICTED = "Restricted"
    OBSERVANCE = "Observance"
