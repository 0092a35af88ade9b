from fastapi import APIRouter

from routers import auth, content, donations, events, expenses, fees, finance, notifications, upload

api_router = APIRouter(prefix="/api")

for module in (auth, events, donations, fees, expenses, finance, upload, content, notifications):
    api_router.include_router(module.router)
