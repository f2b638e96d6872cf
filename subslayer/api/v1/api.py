from fastapi import APIRouter

from subslayer.api.v1.routes import (
    users,
    profile,
    subscriptions,
    dashboard,
    checkout,
    email,
    notification,
)

# Business routes; the fastapi-users auth routers are mounted in main.py
api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["User Management"])
api_router.include_router(profile.router)
api_router.include_router(subscriptions.router)
api_router.include_router(dashboard.router)
api_router.include_router(checkout.router)
api_router.include_router(email.router)
api_router.include_router(notification.router, prefix="/notification", tags=["Notifications"])
