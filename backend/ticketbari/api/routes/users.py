import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketbari.api.deps import ensure_self, get_current_email, require_admin
from ticketbari.core.errors import NotFoundError
from ticketbari.core.security import utcnow
from ticketbari.db.session import get_db
from ticketbari.models.user import User
from ticketbari.schemas.user import PhotoUpdate, ProfileUpdate, RoleUpdate, UserCreate, UserOut
from ticketbari.services.catalog import mark_vendor_fraud

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_by_email_or_404(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def _get_by_id_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.post("")
@router.post("/")
def save_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Create the user on first sign-in. Signing in again is a no-op."""
    email = payload.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        return {"message": "User already exists", "inserted_id": None}
    user = User(
        email=email,
        name=payload.name,
        photo=payload.photo,
        phone=payload.phone,
        address=payload.address,
        role="user",
        is_fraud=False,
        created_at=utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s registered", email)
    return {"message": "User created", "inserted_id": user.id}


@router.get("", response_model=List[UserOut], dependencies=[Depends(require_admin)])
@router.get("/", response_model=List[UserOut], dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.id.asc()).all()


@router.get("/role/{email}")
def get_role(email: str, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    user = db.query(User).filter(User.email == caller).first()
    return {"role": user.role if user and user.role else "user"}


@router.get("/details/{email}", response_model=UserOut)
def get_details(email: str, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    return _get_by_email_or_404(db, caller)


@router.get("/{email}", response_model=UserOut, dependencies=[Depends(get_current_email)])
def get_user(email: str, db: Session = Depends(get_db)):
    return _get_by_email_or_404(db, email)


@router.patch("/update/{email}", response_model=UserOut)
def update_profile(email: str, payload: ProfileUpdate, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    """Partial profile update; empty values leave the stored field untouched."""
    ensure_self(email, caller)
    user = _get_by_email_or_404(db, caller)
    for key, value in payload.model_dump().items():
        if value:
            setattr(user, key, value)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


@router.patch("/role/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def update_role(user_id: int, payload: RoleUpdate, db: Session = Depends(get_db)):
    user = _get_by_id_or_404(db, user_id)
    user.role = payload.role
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("Role of %s set to %s", user.email, user.role)
    return user


@router.patch("/fraud/{user_id}", dependencies=[Depends(require_admin)])
def mark_fraud(user_id: int, db: Session = Depends(get_db)):
    user, hidden = mark_vendor_fraud(db, user_id)
    return {"status": "ok", "user": UserOut.model_validate(user), "hidden_tickets": hidden}


@router.patch("/{email}", response_model=UserOut)
def update_photo(email: str, payload: PhotoUpdate, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    user = _get_by_email_or_404(db, caller)
    user.photo = payload.photo
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


@router.put("/{email}", response_model=UserOut)
def replace_profile(email: str, payload: ProfileUpdate, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    user = _get_by_email_or_404(db, caller)
    for key, value in payload.model_dump().items():
        setattr(user, key, value)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", dependencies=[Depends(require_admin)])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = _get_by_id_or_404(db, user_id)
    email = user.email
    db.delete(user)
    db.commit()
    logger.info("User %s deleted", email)
    return {"status": "deleted"}
