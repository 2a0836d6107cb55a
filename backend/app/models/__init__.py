from .generated import (
    Base,
    DailyCapacities,
    Facilities,
    Halls,
    Rokuyo,
    Schedules,
)

__all__ = [
    "Base",
    "DailyCapacities",
    "Facilities",
    "Halls",
    "Rokuyo",
    "Schedules",
]
