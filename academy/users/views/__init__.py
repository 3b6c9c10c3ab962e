"""
Academy Users Views Package

Authentication (JWT login, refresh, logout) and current-user endpoints.
"""

from .auth_views import (
    CustomTokenObtainPairView,
    CustomTokenRefreshView,
    LogoutView,
)
from .user_self_info import CurrentUserView
