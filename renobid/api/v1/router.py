from fastapi import APIRouter

from renobid.api.v1.admin_bids import router as admin_bids_router
from renobid.api.v1.contractor_bids import router as contractor_bids_router
from renobid.api.v1.homeowner_bids import router as homeowner_bids_router
from renobid.api.v1.notifications import router as notifications_router

v1_router = APIRouter()

v1_router.include_router(contractor_bids_router)
v1_router.include_router(homeowner_bids_router)
v1_router.include_router(admin_bids_router)
v1_router.include_router(notifications_router)
