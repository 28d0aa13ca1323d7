from fastapi import APIRouter

from ticketbari.api.routes import health, auth, users, tickets, admin, bookings, payments, stats

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])  # GET /, GET /health
api_router.include_router(auth.router, tags=["auth"])  # POST /jwt
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(payments.router, tags=["payments"])  # /create-payment-intent, /payments
api_router.include_router(stats.router, tags=["stats"])  # /public-stats, /vendor/stats, /user/stats, /locations
