from fastapi import APIRouter
from . import auth, admins, staff, onboarding, restaurants


router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admins.router, prefix="/admins", tags=["admins"])
router.include_router(staff.router, prefix="/admin/staff", tags=["staff"])
router.include_router(onboarding.router, prefix="/staff", tags=["onboarding"])
router.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
