"""Authentication-related schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class BannedDetail(BaseModel):
    code: str = "banned"
    banned_until: datetime
