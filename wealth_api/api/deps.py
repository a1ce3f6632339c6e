# wealth_api/api/deps.py
from fastapi import Depends, HTTPException, Header, Request
from jose import JWTError, ExpiredSignatureError
from sqlalchemy.orm import Session
import logging

from wealth_api.core.inference import InferenceClient
from wealth_api.core.record_store import SqlAlchemyRecordStore
from wealth_api.core.security import decode_access_token
from wealth_api.db.session import get_db
from wealth_api.models.financial import User

logger = logging.getLogger(__name__)


async def get_current_user(
    authorization: str = Header(None),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolves the bearer token to a stored user.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    token = authorization.replace("Bearer ", "", 1).strip()

    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise HTTPException(status_code=401, detail="Token expired")
    except JWTError as e:
        logger.warning("JWT decode error: %s", str(e))
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid token payload: missing user ID")

    user = db.query(User).filter(User.id == sub).first()
    if not user:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")

    return user


def get_record_store(db: Session = Depends(get_db)) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(db)


def get_inference_client(request: Request) -> InferenceClient:
    """The client is built once in the app lifespan and shared read-only."""
    return request.app.state.inference_client
