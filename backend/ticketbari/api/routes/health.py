from fastapi import APIRouter

router = APIRouter()


@router.get("/")
def root():
    return {"message": "TicketBari Server is Running!"}


@router.get("/health")
def health():
    return {"status": "ok"}
