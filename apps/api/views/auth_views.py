"""
Authentication API views for NACK POS.
"""
import jwt
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from apps.api.authentication import JWTService
from apps.api.permissions import get_agent
from apps.api.serializers import (
    AgentLoginSerializer, EstablishmentSerializer, LoginSerializer, RegisterSerializer,
    TeamMemberSerializer, TokenRefreshSerializer, UserSerializer
)
from apps.billing.services.billing_service import BillingService
from apps.team.services.team_service import TeamService
from apps.users.services.account_service import AccountService, AccountServiceError


def _owner_payload(user):
    establishment = getattr(user, 'establishment', None)
    return {
        'user': UserSerializer(user).data,
        'establishment': EstablishmentSerializer(establishment).data if establishment else None,
        'billing': BillingService.get_state(user),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Owner login endpoint.
    Returns JWT tokens on successful authentication.
    """
    serializer = LoginSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.validated_data['user']
        tokens = JWTService.generate_tokens(user)

        return Response({
            'tokens': tokens,
            **_owner_payload(user)
        })

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    Owner sign-up. The free trial starts immediately.
    """
    serializer = RegisterSerializer(data=request.data)
    if serializer.is_valid():
        try:
            user = AccountService.register_owner(**serializer.validated_data)
        except AccountServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'tokens': JWTService.generate_tokens(user),
            **_owner_payload(user)
        }, status=status.HTTP_201_CREATED)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_token(request):
    """
    Refresh access token using refresh token.
    """
    serializer = TokenRefreshSerializer(data=request.data)
    if serializer.is_valid():
        try:
            refresh_token = serializer.validated_data['refresh_token']
            tokens = JWTService.refresh_access_token(refresh_token)
            return Response(tokens)
        except jwt.InvalidTokenError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_401_UNAUTHORIZED
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([AllowAny])
def agent_login(request):
    """
    Open a staff dashboard from an agent link.
    The client then sends the code in the X-Agent-Code header.
    """
    serializer = AgentLoginSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    member = TeamService.resolve_agent(serializer.validated_data['agent_code'], touch=True)
    if member is None:
        return Response(
            {'error': 'Code agent invalide ou désactivé'},
            status=status.HTTP_404_NOT_FOUND
        )

    establishment = getattr(member.owner, 'establishment', None)
    return Response({
        'member': TeamMemberSerializer(member).data,
        'establishment': establishment.name if establishment else '',
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Get current owner or staff member information.
    """
    agent = get_agent(request)
    if agent is not None:
        return Response({'member': TeamMemberSerializer(agent).data})

    return Response(_owner_payload(request.user))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    Logout endpoint.
    JWT tokens are stateless; the client drops them.
    """
    return Response({'message': 'Successfully logged out'})
