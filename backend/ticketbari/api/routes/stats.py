from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketbari.api.deps import ensure_self, get_current_email, require_vendor
from ticketbari.db.session import get_db
from ticketbari.models.user import User
from ticketbari.services import stats

router = APIRouter()


@router.get("/public-stats", response_model=dict)
def public_stats(db: Session = Depends(get_db)):
    return stats.public_stats(db)


@router.get("/vendor/stats/{email}", response_model=dict)
def vendor_stats(email: str, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    ensure_self(email, vendor.email)
    return stats.vendor_stats(db, vendor.email)


@router.get("/user/stats/{email}", response_model=dict)
def user_stats(email: str, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    return stats.user_stats(db, caller)


@router.get("/locations", response_model=dict)
def locations(db: Session = Depends(get_db)):
    return stats.locations(db)
