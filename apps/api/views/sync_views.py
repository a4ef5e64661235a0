"""
Offline sync API views for NACK POS.
Clients upload the writes they queued while offline; the server replays them.
"""
import logging

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.permissions import IsOwner, IsOwnerOrStaff, agent_code_of, can_queue
from apps.api.serializers import OfflineTaskSerializer, UploadQueueSerializer
from apps.sync.services.offline_queue import OfflineQueue, OfflineQueueError
from apps.sync.services.processor import TaskProcessor

logger = logging.getLogger(__name__)


def _flush_payload(queue: OfflineQueue, report):
    return {
        'processed': report.processed,
        'blocked': report.blocked,
        'error': report.error,
        'failed_task': OfflineTaskSerializer(report.failed).data if report.failed else None,
        'dead_lettered': report.dead_lettered,
        'remaining': queue.size(),
    }


@api_view(['POST'])
@permission_classes([IsOwnerOrStaff])
def upload(request):
    """
    Append a batch of client tasks to the queue, in the order given.
    The batch is replayed right away unless flush is false.
    """
    serializer = UploadQueueSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    denied = sorted({
        item['type'] for item in serializer.validated_data['tasks']
        if not can_queue(request, item['type'])
    })
    if denied:
        return Response(
            {'error': f"Tâches non autorisées pour ce rôle: {', '.join(denied)}"},
            status=status.HTTP_403_FORBIDDEN
        )

    queue = OfflineQueue(request.user)
    agent_code = agent_code_of(request)
    try:
        with transaction.atomic():
            tasks = [
                queue.enqueue(
                    task_type=item['type'],
                    payload=item['payload'],
                    agent_code=agent_code,
                    client_id=item.get('id'),
                    queued_at=item.get('created_at')
                )
                for item in serializer.validated_data['tasks']
            ]
    except OfflineQueueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info(f"Queued {len(tasks)} offline tasks", extra={
        'owner_id': request.user.id,
        'agent_code': agent_code,
        'count': len(tasks),
        'event_type': 'offline_tasks_uploaded'
    })

    data = {'queued': len(tasks)}
    if serializer.validated_data['flush']:
        data.update(_flush_payload(queue, queue.flush(TaskProcessor())))
    else:
        data['remaining'] = queue.size()
    return Response(data, status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([IsOwnerOrStaff])
def flush(request):
    """
    Replay the owner's queue now.
    """
    queue = OfflineQueue(request.user)
    report = queue.flush(TaskProcessor())
    return Response(_flush_payload(queue, report))


@api_view(['GET'])
@permission_classes([IsOwnerOrStaff])
def queue_status(request):
    queue = OfflineQueue(request.user)
    head = queue.peek()
    return Response({
        'size': queue.size(),
        'head': OfflineTaskSerializer(head).data if head else None,
        'failed': OfflineTaskSerializer(queue.failed(), many=True).data,
    })


@api_view(['DELETE'])
@permission_classes([IsOwner])
def discard_failed(request):
    """
    Drop tasks that were set aside after too many failed attempts.
    """
    deleted, _detail = OfflineQueue(request.user).failed().delete()
    return Response({'deleted': deleted})
