from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketbari.api.deps import ensure_self, get_current_email, get_payment_gateway
from ticketbari.db.session import get_db
from ticketbari.models.payment import Payment
from ticketbari.schemas.payment import PaymentCreate, PaymentIntentOut, PaymentIntentRequest, PaymentOut
from ticketbari.services.payment_gateway import PaymentGateway
from ticketbari.services.payments import record_payment

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentOut, dependencies=[Depends(get_current_email)])
def create_payment_intent(payload: PaymentIntentRequest, gateway: PaymentGateway = Depends(get_payment_gateway)):
    return {"client_secret": gateway.create_payment_intent(payload.amount)}


@router.post("/payments", response_model=PaymentOut)
def save_payment(payload: PaymentCreate, db: Session = Depends(get_db), email: str = Depends(get_current_email)):
    return record_payment(db, email, payload.booking_id, payload.transaction_id, payload.amount)


@router.get("/payments/{email}", response_model=List[PaymentOut])
def payment_history(email: str, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    return db.query(Payment).filter(Payment.user_email == caller).order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
