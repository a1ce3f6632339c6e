# wealth_api/core/record_store.py
from enum import Enum
from typing import List, Protocol
import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wealth_api.models.financial import Asset, Income, Liability

logger = logging.getLogger(__name__)


class RecordKind(str, Enum):
    ASSET = "asset"
    INCOME = "income"
    LIABILITY = "liability"


RECORD_MODELS = {
    RecordKind.ASSET: Asset,
    RecordKind.INCOME: Income,
    RecordKind.LIABILITY: Liability,
}


class RecordStoreError(Exception):
    """The store could not return a record collection."""


class RecordStore(Protocol):
    async def fetch_all(self, kind: RecordKind) -> List:
        ...


class SqlAlchemyRecordStore:
    """Reads whole collections across every owner, unfiltered."""

    def __init__(self, db: Session):
        self.db = db

    async def fetch_all(self, kind: RecordKind) -> List:
        model = RECORD_MODELS[kind]
        try:
            # Session I/O is blocking
            return await run_in_threadpool(lambda: self.db.query(model).all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {kind.value} records: {e}")
            raise RecordStoreError("Failed to aggregate financial data") from e
