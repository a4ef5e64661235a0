"""
Unit tests for owner accounts and establishment settings.
"""
import pytest

from apps.billing.services.billing_service import BillingService
from apps.inventory.models import Loss, Product
from apps.orders.models import Sale
from apps.team.models import TeamMember
from apps.users.models import Establishment
from apps.users.services.account_service import AccountService, AccountServiceError


class TestRegisterOwner:

    def test_register_opens_trial(self):
        user = AccountService.register_owner('nouveau', 'nouveau@bar.ga', 'motdepasse123')

        assert user.check_password('motdepasse123')
        assert BillingService.get_state(user)['is_in_trial'] is True

    def test_username_taken(self, owner):
        with pytest.raises(AccountServiceError):
            AccountService.register_owner('OWNER_TEST', 'autre@bar.ga', 'motdepasse123')

    def test_email_taken(self, owner):
        with pytest.raises(AccountServiceError):
            AccountService.register_owner('autre', 'OWNER@test.com', 'motdepasse123')


class TestCompleteProfile:
    """Test AccountService.complete_profile."""

    def test_welcome_credits_once(self, owner):
        establishment, granted = AccountService.complete_profile(owner, {'name': 'Chez Nack', 'city': 'Libreville'})

        assert granted is True
        assert establishment.welcome_credits_granted is True
        assert BillingService.get_account(owner).event_credits == 2

        _establishment, granted_again = AccountService.complete_profile(owner, {'city': 'Port-Gentil'})

        assert granted_again is False
        assert BillingService.get_account(owner).event_credits == 2
        assert Establishment.objects.get(owner=owner).city == 'Port-Gentil'

    def test_incomplete_profile_gets_nothing(self, owner):
        establishment, granted = AccountService.complete_profile(owner, {'name': 'Chez Nack'})

        assert establishment.is_complete is False
        assert granted is False
        assert BillingService.get_account(owner).event_credits == 0

    def test_name_required(self, owner):
        with pytest.raises(AccountServiceError):
            AccountService.complete_profile(owner, {'city': 'Libreville'})


class TestResetData:

    def test_reset_sales_and_stock(self, owner, beer, waiter):
        Sale.objects.create(owner=owner, total=1000, items=[])
        Loss.objects.create(owner=owner, product=beer, quantity=1)

        counts = AccountService.reset_data(owner, ['sales', 'stock'])

        assert counts == {'sales': 2, 'stock': 1}
        assert not Sale.objects.filter(owner=owner).exists()
        assert Product.objects.get(pk=beer.pk).quantity == 0
        assert TeamMember.objects.filter(owner=owner).exists()

    def test_reset_team(self, owner, waiter, cashier):
        counts = AccountService.reset_data(owner, ['team'])

        assert counts == {'team': 2}
        assert not TeamMember.objects.filter(owner=owner).exists()

    def test_unknown_scope(self, owner):
        with pytest.raises(AccountServiceError):
            AccountService.reset_data(owner, ['everything'])

    def test_empty_scopes(self, owner):
        with pytest.raises(AccountServiceError):
            AccountService.reset_data(owner, [])
