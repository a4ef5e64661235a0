"""
Replays queued offline writes through the domain services.
"""
import logging
from typing import Any, Callable, Dict

from django.utils.translation import gettext_lazy as _

from apps.events.services.event_service import EventService
from apps.orders.services.order_service import OrderService
from apps.sync.models import OfflineTask, TaskType
from apps.sync.services.offline_queue import OfflineQueueError
from apps.team.services.team_service import TeamService

logger = logging.getLogger(__name__)


class TaskProcessor:
    """
    Dispatches a queued task to the service that performs it.
    Service exceptions propagate so the queue keeps the task.
    """

    def __init__(self):
        self.handlers: Dict[str, Callable[[OfflineTask], Any]] = {
            TaskType.ADD_ORDER: self.add_order,
            TaskType.PAY_ORDER: self.pay_order,
            TaskType.RESERVE_TICKET: self.reserve_ticket,
            TaskType.ADD_TEAM_MEMBER: self.add_team_member,
        }

    def __call__(self, task: OfflineTask) -> Any:
        handler = self.handlers.get(task.task_type)
        if handler is None:
            raise OfflineQueueError(_("Unknown task type: %(type)s") % {'type': task.task_type})
        return handler(task)

    @staticmethod
    def _require(payload: Dict[str, Any], *names):
        missing = [name for name in names if payload.get(name) in (None, '')]
        if missing:
            raise OfflineQueueError(_("Missing fields: %(fields)s") % {'fields': ', '.join(missing)})

    def add_order(self, task: OfflineTask):
        payload = task.payload
        self._require(payload, 'table_number', 'items')
        return OrderService.create_order(
            owner=task.owner,
            table_number=str(payload['table_number']),
            items=payload['items'],
            agent_code=task.agent_code
        )

    def pay_order(self, task: OfflineTask):
        payload = task.payload
        self._require(payload, 'order_id', 'payment_method')
        amount = payload.get('amount_received')
        return OrderService.pay_order(
            owner=task.owner,
            order_id=payload['order_id'],
            payment_method=payload['payment_method'],
            amount_received=int(amount) if amount not in (None, '') else None,
            cashier_code=task.agent_code
        )

    def reserve_ticket(self, task: OfflineTask):
        payload = task.payload
        self._require(payload, 'event_id', 'customer_name', 'customer_email', 'quantity')
        event = EventService.get_event(task.owner, payload['event_id'])
        return EventService.reserve_tickets(
            event_id=event.id,
            customer_name=payload['customer_name'],
            customer_email=payload['customer_email'],
            quantity=int(payload['quantity']),
            customer_phone=payload.get('customer_phone', '')
        )

    def add_team_member(self, task: OfflineTask):
        payload = task.payload
        self._require(payload, 'first_name', 'last_name', 'phone', 'role')
        return TeamService.add_member(
            owner=task.owner,
            first_name=payload['first_name'],
            last_name=payload['last_name'],
            phone=payload['phone'],
            role=payload['role'],
            email=payload.get('email', '')
        )
