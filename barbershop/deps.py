# barbershop/deps.py

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import Depends

from .config import Settings, get_settings


def get_now(settings: Settings = Depends(get_settings)) -> datetime:
    # overridden in tests to pin the clock
    return datetime.now(ZoneInfo(settings.timezone))
