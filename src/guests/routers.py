from fastapi import APIRouter

from .features.assign_invitation.router import router as assign_invitation_router
from .features.import_guests.router import router as import_guests_router
from .features.manage_guests.router import router as manage_guests_router
from .features.manage_invitations.router import router as manage_invitations_router

router = APIRouter()

router.include_router(manage_guests_router, tags=["Guests"])
router.include_router(manage_invitations_router, tags=["Invitations"])
router.include_router(import_guests_router, tags=["Import"])
router.include_router(assign_invitation_router, tags=["Import"])
