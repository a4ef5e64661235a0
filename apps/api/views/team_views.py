"""
Team API views for NACK POS.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.permissions import IsOwner
from apps.api.serializers import AddTeamMemberSerializer, AssignEventSerializer, TeamMemberSerializer
from apps.api.views.billing_views import payment_required_response
from apps.billing.services.billing_service import PaymentRequired
from apps.team.models import TeamMember
from apps.team.services.team_service import TeamService, TeamServiceError


@api_view(['GET', 'POST'])
@permission_classes([IsOwner])
def members(request):
    """
    List the team, or add a member.
    Waiters and cashiers use a member credit; without one the answer is 402.
    """
    if request.method == 'GET':
        queryset = TeamMember.objects.filter(owner=request.user).select_related('assigned_event')
        role = request.query_params.get('role')
        if role:
            queryset = queryset.filter(role=role)
        return Response(TeamMemberSerializer(queryset, many=True).data)

    serializer = AddTeamMemberSerializer(data=request.data)
    if serializer.is_valid():
        try:
            member = TeamService.add_member(owner=request.user, **serializer.validated_data)
        except PaymentRequired as e:
            return payment_required_response(e)
        except TeamServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(TeamMemberSerializer(member).data, status=status.HTTP_201_CREATED)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsOwner])
def remove_member(request, member_id):
    try:
        TeamService.remove_member(request.user, member_id)
    except TeamServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsOwner])
def toggle_member(request, member_id):
    """
    Activate or deactivate a member. A deactivated agent code stops working.
    """
    try:
        member = TeamService.toggle_status(request.user, member_id)
    except TeamServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(TeamMemberSerializer(member).data)


@api_view(['POST'])
@permission_classes([IsOwner])
def assign_event(request, member_id):
    """
    Assign an event agent to the event they check tickets for.
    """
    serializer = AssignEventSerializer(data=request.data)
    if serializer.is_valid():
        event_id = serializer.validated_data['event_id']
        try:
            member = TeamService.assign_event(
                request.user,
                member_id,
                str(event_id) if event_id else None
            )
        except TeamServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(TeamMemberSerializer(member).data)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
