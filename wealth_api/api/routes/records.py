# wealth_api/api/routes/records.py
"""
Owner-scoped CRUD for assets, incomes and liabilities.

The three collections share one set of handlers; another user's record is
reported as not found.
"""
from typing import List, Type

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
import logging

from wealth_api.api.deps import get_current_user
from wealth_api.core.record_crud import (
    create_record,
    delete_record,
    get_record_by_id,
    get_records_by_user,
    update_record,
)
from wealth_api.db.session import Base, get_db
from wealth_api.models.financial import Asset, Income, Liability, User
from wealth_api.schemas.record_schema import (
    LiabilityCreate,
    LiabilityResponse,
    LiabilityUpdate,
    RecordCreate,
    RecordResponse,
    RecordUpdate,
)

logger = logging.getLogger(__name__)


def build_record_router(
    prefix: str,
    label: str,
    model: Type[Base],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[f"{label}s"])
    not_found = f"{label} not found"

    @router.get("/", response_model=List[response_schema])
    def list_records(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        records = get_records_by_user(db, model, current_user.id)
        logger.info("Fetched %d %s records for user %s", len(records), label.lower(), current_user.id)
        return records

    @router.get("/{record_id}", response_model=response_schema)
    def read_record(
        record_id: str,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        record = get_record_by_id(db, model, record_id, current_user.id)
        if not record:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return record

    @router.post("/", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    def create_new_record(
        data: create_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        record = create_record(db, model, data, current_user.id)
        logger.info("Created %s %s for user %s", label.lower(), record.id, current_user.id)
        return record

    @router.put("/{record_id}", response_model=response_schema)
    def update_existing_record(
        record_id: str,
        data: update_schema,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        record = update_record(db, model, record_id, current_user.id, data)
        if not record:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return record

    @router.delete("/{record_id}")
    def delete_existing_record(
        record_id: str,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        if not delete_record(db, model, record_id, current_user.id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return {"message": f"{label} removed"}

    return router


asset_router = build_record_router(
    "/api/assets", "Asset", Asset, RecordCreate, RecordUpdate, RecordResponse
)
income_router = build_record_router(
    "/api/incomes", "Income", Income, RecordCreate, RecordUpdate, RecordResponse
)
liability_router = build_record_router(
    "/api/liabilities", "Liability", Liability, LiabilityCreate, LiabilityUpdate, LiabilityResponse
)
