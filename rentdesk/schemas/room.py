"""
Room schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    floor: Optional[str] = None
    capacity: int = 1
    default_rent: Decimal
    default_deposit: Decimal
    status: str = "vacant"
    notes: Optional[str] = None


class RoomUpdate(BaseModel):
    """Only the fields sent are changed."""

    name: Optional[str] = None
    floor: Optional[str] = None
    capacity: Optional[int] = None
    default_rent: Optional[Decimal] = None
    default_deposit: Optional[Decimal] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class RoomResponse(BaseModel):
    id: int
    name: str
    floor: Optional[str] = None
    capacity: int
    current_occupancy: int
    default_rent: float
    default_deposit: float
    status: str
    current_lease_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoomListResponse(BaseModel):
    data: List[RoomResponse]
    total: int
