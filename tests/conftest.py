"""
Pytest configuration and fixtures for NACK POS tests.
"""
from datetime import time, timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from apps.api.authentication import JWTService
from apps.billing.services.billing_service import BillingService
from apps.events.models import Event, Ticket, TicketStatus
from apps.inventory.models import Product, ProductCategory
from apps.team.models import TeamMember, TeamRole
from apps.users.models import Establishment

User = get_user_model()


@pytest.fixture
def api_client():
    """API client for testing."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Create an establishment owner with a billing account."""
    user = User.objects.create_user(
        username='owner_test',
        email='owner@test.com',
        password='test_owner_123'
    )
    BillingService.get_account(user)
    return user


@pytest.fixture
def other_owner(db):
    """Create a second, unrelated owner."""
    user = User.objects.create_user(
        username='other_owner',
        email='other@test.com',
        password='test_other_123'
    )
    BillingService.get_account(user)
    return user


@pytest.fixture
def establishment(owner):
    """Completed establishment profile of the owner."""
    return Establishment.objects.create(
        owner=owner,
        name='Le Test Bar',
        establishment_type='bar',
        city='Libreville',
        whatsapp_number='+241 77 12 34 56',
        welcome_credits_granted=True
    )


@pytest.fixture
def beer(owner):
    """Beer with a six-pack formula."""
    return Product.objects.create(
        owner=owner,
        name='Régab',
        category=ProductCategory.BEER,
        price=1000,
        cost=600,
        quantity=20,
        formula_units=6,
        formula_price=900
    )


@pytest.fixture
def soda(owner):
    return Product.objects.create(
        owner=owner,
        name='Coca-Cola',
        category=ProductCategory.SOFT,
        price=500,
        cost=250,
        quantity=3
    )


def _member(owner, role, code, first_name, phone, **extra):
    return TeamMember.objects.create(
        owner=owner,
        first_name=first_name,
        last_name='Test',
        phone=phone,
        role=role,
        agent_code=code,
        **extra
    )


@pytest.fixture
def waiter(owner):
    return _member(owner, TeamRole.WAITER, 'AGT-WAIT01', 'Marc', '+24100000001')


@pytest.fixture
def cashier(owner):
    return _member(owner, TeamRole.CASHIER, 'AGT-CASH01', 'Sarah', '+24100000002')


@pytest.fixture
def event(owner, establishment):
    """Upcoming event with a small capacity."""
    return Event.objects.create(
        owner=owner,
        title='Soirée Test',
        date=timezone.localdate() + timedelta(days=3),
        time=time(21, 0),
        ticket_price=5000,
        max_capacity=3
    )


@pytest.fixture
def event_agent(owner, event):
    """Door agent assigned to the event."""
    return _member(owner, TeamRole.EVENT_AGENT, 'AGT-DOOR01', 'Paul', '+24100000003', assigned_event=event)


@pytest.fixture
def paid_ticket(owner, event):
    """Paid ticket for two people."""
    event.tickets_sold = 2
    event.save(update_fields=['tickets_sold'])
    return Ticket.objects.create(
        owner=owner,
        event=event,
        customer_name='Aline',
        customer_email='aline@test.com',
        quantity=2,
        total_amount=10000,
        status=TicketStatus.PAID
    )


@pytest.fixture
def jwt_owner_client(api_client, owner):
    """API client with JWT token for the owner."""
    tokens = JWTService.generate_tokens(owner)
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")
    return api_client


def agent_client(member):
    client = APIClient()
    client.credentials(HTTP_X_AGENT_CODE=member.agent_code)
    return client


@pytest.fixture
def waiter_client(waiter):
    """API client authenticated with the waiter's agent code."""
    return agent_client(waiter)


@pytest.fixture
def cashier_client(cashier):
    """API client authenticated with the cashier's agent code."""
    return agent_client(cashier)


@pytest.fixture
def agent_client_door(event_agent):
    """API client authenticated with the door agent's code."""
    return agent_client(event_agent)


@pytest.fixture
def mock_redis():
    """Mock Redis for testing."""
    import fakeredis
    return fakeredis.FakeStrictRedis()


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Enable database access for all tests.
    This is needed for Django testing.
    """
    pass
