"""
Room endpoints.
Endpoint: /api/rooms/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.dependencies import get_current_admin
from ..schemas.lease import LeaseListResponse
from ..schemas.room import RoomCreate, RoomListResponse, RoomResponse, RoomUpdate
from ..services.room import RoomService

router = APIRouter(tags=["Rooms"])


@router.get("", response_model=RoomListResponse)
async def list_rooms(
    status: Optional[str] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    rooms = RoomService(db).list_rooms(status)
    return {"data": rooms, "total": len(rooms)}


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    body: RoomCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return RoomService(db).create_room(**body.model_dump())


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return RoomService(db).get_room(room_id)


@router.put("/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: int,
    body: RoomUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return RoomService(db).update_room(room_id, body.model_dump(exclude_unset=True))


@router.get("/{room_id}/leases", response_model=LeaseListResponse)
async def get_room_leases(
    room_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Lease history of a room, newest first."""
    leases = RoomService(db).list_room_leases(room_id)
    return {"data": leases, "total": len(leases)}
