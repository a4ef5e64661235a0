"""
Authentication for NACK POS API.

Owners authenticate with JWT bearer tokens. Team members authenticate with
their agent code in the X-Agent-Code header; the request then acts on the
owner's data with `request.auth` set to the TeamMember.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional, Tuple

import jwt
from django.conf import settings
from django.contrib.auth.models import User
from django.utils.translation import gettext_lazy as _
from rest_framework import authentication, exceptions

from apps.team.models import TeamMember
from apps.team.services.team_service import TeamService

AGENT_CODE_HEADER = 'HTTP_X_AGENT_CODE'


class JWTAuthentication(authentication.BaseAuthentication):
    """
    JWT Authentication class for DRF.
    """

    def authenticate(self, request) -> Optional[Tuple[User, dict]]:
        auth_header = request.META.get('HTTP_AUTHORIZATION')

        if not auth_header:
            return None

        try:
            auth_method, token = auth_header.split(' ', 1)
        except ValueError:
            return None

        if auth_method.lower() != 'bearer':
            return None

        try:
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=['HS256']
            )
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed(_('Token has expired'))
        except jwt.InvalidTokenError:
            raise exceptions.AuthenticationFailed(_('Invalid token'))

        if payload.get('type') != 'access':
            raise exceptions.AuthenticationFailed(_('Invalid token'))

        try:
            user = User.objects.get(id=payload['user_id'])
        except User.DoesNotExist:
            raise exceptions.AuthenticationFailed(_('User not found'))

        if not user.is_active:
            raise exceptions.AuthenticationFailed(_('User account is disabled'))

        return (user, payload)

    def authenticate_header(self, request):
        return 'Bearer'


class AgentCodeAuthentication(authentication.BaseAuthentication):
    """
    Team member authentication by agent code.
    Returns (owner user, TeamMember).
    """

    def authenticate(self, request) -> Optional[Tuple[User, TeamMember]]:
        code = request.META.get(AGENT_CODE_HEADER)
        if not code:
            return None

        member = TeamService.resolve_agent(code, touch=True)
        if member is None:
            raise exceptions.AuthenticationFailed(_('Code agent invalide ou désactivé'))
        if not member.owner.is_active:
            raise exceptions.AuthenticationFailed(_('User account is disabled'))

        return (member.owner, member)

    def authenticate_header(self, request):
        return 'Agent-Code'


class JWTService:
    """Service for JWT token management."""

    @staticmethod
    def _encode(payload: dict) -> str:
        return jwt.encode(payload, settings.SECRET_KEY, algorithm='HS256')

    @staticmethod
    def _access_payload(user: User, now: datetime) -> dict:
        return {
            'user_id': user.id,
            'username': user.username,
            'email': user.email,
            'iat': now,
            'exp': now + timedelta(seconds=settings.JWT_ACCESS_TTL),
            'type': 'access'
        }

    @staticmethod
    def generate_tokens(user: User) -> dict:
        """
        Generate access and refresh tokens for a user.
        """
        now = datetime.now(dt_timezone.utc)

        refresh_payload = {
            'user_id': user.id,
            'iat': now,
            'exp': now + timedelta(seconds=settings.JWT_REFRESH_TTL),
            'type': 'refresh'
        }

        return {
            'access_token': JWTService._encode(JWTService._access_payload(user, now)),
            'refresh_token': JWTService._encode(refresh_payload),
            'token_type': 'Bearer',
            'expires_in': settings.JWT_ACCESS_TTL,
        }

    @staticmethod
    def refresh_access_token(refresh_token: str) -> dict:
        """
        Generate a new access token using a refresh token.

        Raises:
            jwt.InvalidTokenError: If refresh token is invalid or expired
        """
        try:
            payload = jwt.decode(
                refresh_token,
                settings.SECRET_KEY,
                algorithms=['HS256']
            )
        except jwt.ExpiredSignatureError:
            raise jwt.InvalidTokenError("Refresh token has expired")
        except jwt.InvalidTokenError:
            raise jwt.InvalidTokenError("Invalid refresh token")

        if payload.get('type') != 'refresh':
            raise jwt.InvalidTokenError("Token is not a refresh token")

        try:
            user = User.objects.get(id=payload['user_id'])
        except User.DoesNotExist:
            raise jwt.InvalidTokenError("User not found")

        if not user.is_active:
            raise jwt.InvalidTokenError("User account is disabled")

        now = datetime.now(dt_timezone.utc)
        return {
            'access_token': JWTService._encode(JWTService._access_payload(user, now)),
            'token_type': 'Bearer',
            'expires_in': settings.JWT_ACCESS_TTL,
        }
