# wealth_api/core/record_crud.py
from typing import List, Optional, Type

from pydantic import BaseModel
from sqlalchemy import and_
from sqlalchemy.orm import Session

from wealth_api.db.session import Base


def get_records_by_user(db: Session, model: Type[Base], user_id: str) -> List:
    return db.query(model).filter(model.user_id == user_id).order_by(model.created_at.desc()).all()


def get_record_by_id(db: Session, model: Type[Base], record_id: str, user_id: str):
    return db.query(model).filter(and_(model.id == record_id, model.user_id == user_id)).first()


def create_record(db: Session, model: Type[Base], data: BaseModel, user_id: str):
    db_record = model(user_id=user_id, **data.model_dump())
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def update_record(db: Session, model: Type[Base], record_id: str, user_id: str, data: BaseModel) -> Optional[Base]:
    db_record = get_record_by_id(db, model, record_id, user_id)
    if not db_record:
        return None

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(db_record, field, value)

    db.commit()
    db.refresh(db_record)
    return db_record


def delete_record(db: Session, model: Type[Base], record_id: str, user_id: str) -> bool:
    db_record = get_record_by_id(db, model, record_id, user_id)
    if not db_record:
        return False

    db.delete(db_record)
    db.commit()
    return True
