"""
Audit service for NACK POS.
"""
import logging
from typing import Any, Dict, Optional
from django.contrib.auth.models import User
from apps.audit.models import EventLog

logger = logging.getLogger(__name__)


class AuditService:
    """Service class for audit trail management."""

    @staticmethod
    def log_event(
        actor_user: Optional[User],
        entity_type: str,
        entity_id: str,
        action: str,
        before_data: Optional[Dict[str, Any]] = None,
        after_data: Optional[Dict[str, Any]] = None,
        agent_code: str = '',
        ip_address: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> EventLog:
        """
        Record an audit event.

        Args:
            actor_user: Owner who performed the action (None for agent actions)
            entity_type: Type of entity affected (model name)
            entity_id: ID of the affected entity
            action: Action performed
            before_data: Entity state before change
            after_data: Entity state after change
            agent_code: Team member code when a member performed the action

        Returns:
            Created EventLog instance
        """
        event = EventLog.objects.create(
            actor_user=actor_user,
            agent_code=agent_code or '',
            entity_type=entity_type,
            entity_id=str(entity_id),
            action=action,
            before_data=AuditService._sanitize_data(before_data),
            after_data=AuditService._sanitize_data(after_data),
            ip_address=ip_address,
            request_id=request_id or ''
        )

        logger.info(f"{entity_type} {action}", extra={
            'entity_type': entity_type,
            'entity_id': str(entity_id),
            'action': action,
            'actor_user_id': getattr(actor_user, 'id', None),
            'agent_code': agent_code,
            'event_type': 'audit_event'
        })

        return event

    @staticmethod
    def _sanitize_data(data: Any) -> Any:
        """
        Sanitize data for JSON serialization.
        Converts non-serializable objects to strings.
        """
        if data is None:
            return None
        if isinstance(data, (str, int, float, bool)):
            return data
        if isinstance(data, dict):
            return {str(key): AuditService._sanitize_data(value) for key, value in data.items()}
        if isinstance(data, (list, tuple)):
            return [AuditService._sanitize_data(item) for item in data]
        return str(data)

    @staticmethod
    def history(entity_type: str, entity_id: str):
        """Audit events for one entity, newest first."""
        return EventLog.objects.filter(entity_type=entity_type, entity_id=str(entity_id))
