"""
API v1 router: mounts every marketplace router.
"""

from fastapi import APIRouter

from fashop.domains.marketplace.api.routes import routers

api_router = APIRouter()

for router in routers:
    api_router.include_router(router)
