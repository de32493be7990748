from fastapi import APIRouter

from airline_ops.api.routes import health, auth, flights, reservations

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET /
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])  # POST /login, /login-json, /register
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])  # POST /, GET /{id}, POST /{id}/cancel
api_router.include_router(flights.router, prefix="/flights", tags=["flights"])  # GET /{id}/capacity
