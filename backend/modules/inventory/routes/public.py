"""Anonymous read-only view of one owner's shared records."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.db import get_db
from core.registry import registry
from modules.inventory.schemas import PublicOwner, PublicRecordsResponse, RecordResponse
from modules.inventory.visibility import public_view

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/records/{owner_id}", response_model=PublicRecordsResponse)
def public_records(owner_id: int, db: Session = Depends(get_db)):
    provider = registry.get_provider("SharingProvider")
    if provider is None:
        raise HTTPException(status_code=503, detail="Sharing is not available")
    owner, records = public_view(db, owner_id, provider)
    return PublicRecordsResponse(
        records=[RecordResponse.model_validate(r) for r in records],
        owner=PublicOwner(id=owner.id, name=owner.name),
    )
