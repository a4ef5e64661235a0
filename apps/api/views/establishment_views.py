"""
Establishment settings API views for NACK POS.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.permissions import IsOwner
from apps.api.serializers import EstablishmentSerializer, ProfileSerializer, ResetDataSerializer
from apps.users.services.account_service import AccountService, AccountServiceError


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsOwner])
def establishment(request):
    """
    Read or complete the owner's establishment profile.
    Completing it the first time grants the welcome event credits.
    """
    if request.method == 'GET':
        current = getattr(request.user, 'establishment', None)
        if current is None:
            return Response({'error': 'Profil incomplet'}, status=status.HTTP_404_NOT_FOUND)
        return Response(EstablishmentSerializer(current).data)

    serializer = ProfileSerializer(data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        establishment, granted = AccountService.complete_profile(request.user, serializer.validated_data)
    except AccountServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'establishment': EstablishmentSerializer(establishment).data,
        'welcome_credits_granted': granted,
    })


@api_view(['POST'])
@permission_classes([IsOwner])
def reset_data(request):
    """
    Wipe sales, stock levels or the team.
    """
    serializer = ResetDataSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        counts = AccountService.reset_data(request.user, serializer.validated_data['scopes'])
    except AccountServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'reset': counts})
