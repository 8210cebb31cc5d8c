from fastapi import APIRouter

from .features.get_invitation.router import router as get_invitation_router
from .features.send_invitations.router import router as send_invitations_router
from .features.submit_rsvp.router import router as submit_rsvp_router
from .features.update_features.router import router as update_features_router
from .features.update_guests.router import router as update_guests_router

router = APIRouter()

router.include_router(update_features_router)
router.include_router(update_guests_router)
router.include_router(send_invitations_router)

public_router = APIRouter()

public_router.include_router(get_invitation_router)
public_router.include_router(submit_rsvp_router)
