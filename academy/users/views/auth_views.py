"""
Academy Authentication Views

Views:
- CustomTokenObtainPairView: Login, JWT tokens stored in HTTP-only cookies
- CustomTokenRefreshView: Refresh tokens from the refresh cookie
- LogoutView: Blacklist the refresh token and clear cookies

The access token is also accepted as a bearer credential in the
Authorization header (see backend.custom_auth).
"""

import logging

from django.conf import settings
from django.http import JsonResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from ..serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger(__name__)


def _set_token_cookies(response, refresh=None, access=None):
    if refresh:
        response.set_cookie(
            "refresh_token",
            refresh,
            httponly=True,
            secure=not settings.DEBUG,
            samesite="Lax",
            path="/",
            max_age=settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"],
        )
    if access:
        response.set_cookie(
            "access_token",
            access,
            httponly=True,
            secure=not settings.DEBUG,
            samesite="Lax",
            path="/",
            max_age=settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"],
        )


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Login view that stores the JWT pair in HTTP-only cookies instead of
    returning it in the response body. The body carries user metadata
    (user_id, username, role, fees_paid).
    """

    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == 200:
            data = response.data
            refresh = data.pop("refresh", None)
            access = data.pop("access", None)
            _set_token_cookies(response, refresh=refresh, access=access)
        return response


class CustomTokenRefreshView(TokenRefreshView):
    """
    Refresh the JWT pair from the refresh_token cookie and write the new
    tokens back into cookies.
    """

    def post(self, request, *args, **kwargs):
        refresh_token = request.COOKIES.get("refresh_token")
        if not refresh_token:
            return Response(
                {"detail": "Refresh token not provided"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = TokenRefreshSerializer(data={"refresh": refresh_token})
        try:
            serializer.is_valid(raise_exception=True)
        except (TokenError, InvalidToken) as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        response = Response(status=status.HTTP_200_OK)
        _set_token_cookies(response, refresh=data.get("refresh"), access=data.get("access"))
        return response


class LogoutView(APIView):
    """
    Blacklist the refresh token (if present) and delete both token cookies.
    Always answers 205 so the client can reset its state.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        refresh_token = request.COOKIES.get("refresh_token")
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as exc:
                logger.info("Logout with unusable refresh token: %s", exc)

        response = JsonResponse({"detail": "Successfully logged out."}, status=205)
        response.delete_cookie("refresh_token")
        response.delete_cookie("access_token")
        return response
