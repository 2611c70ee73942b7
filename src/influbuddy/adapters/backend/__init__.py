"""Backend REST services.

Each module wraps one resource of the tracker API on top of `BackendClient`.
"""

from influbuddy.adapters.backend.campaigns import CampaignsService
from influbuddy.adapters.backend.client import BackendClient
from influbuddy.adapters.backend.notifications import NotificationsService
from influbuddy.adapters.backend.partners import PartnersService
from influbuddy.adapters.backend.users import UsersService

__all__ = [
    "BackendClient",
    "CampaignsService",
    "NotificationsService",
    "PartnersService",
    "UsersService",
]
