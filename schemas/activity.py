# schemas/activity.py
from datetime import datetime
from typing import Optional

from .base import CamelModel


class ActivityLogResponse(CamelModel):
     id: int
     user: Optional[str] = None
     action: str
     description: Optional[str] = None
     type: Optional[str] = None
     status: str
     timestamp: datetime
