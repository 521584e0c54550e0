from src.config.settings import settings

GUESTS_URL = f"{settings.API_PREFIX}/guests"
GUEST_SEARCH_URL = f"{GUESTS_URL}/search"
GUESTS_BY_INVITATION_URL = f"{GUESTS_URL}/invitation/{{invitation_id}}"
GUEST_URL = f"{GUESTS_URL}/{{guest_id}}"
GUESTS_BULK_DELETE_URL = f"{GUESTS_URL}/bulk-delete"

INVITATIONS_URL = f"{settings.API_PREFIX}/invitations"
INVITATION_STATS_URL = f"{INVITATIONS_URL}/stats"
INVITATION_URL = f"{INVITATIONS_URL}/{{invitation_id}}"

IMPORT_GUESTS_URL = f"{settings.API_PREFIX}/import/guests"
UNASSIGNED_GUESTS_URL = f"{settings.API_PREFIX}/import/unassigned"
ASSIGN_INVITATION_URL = f"{settings.API_PREFIX}/import/assign-invitation"
