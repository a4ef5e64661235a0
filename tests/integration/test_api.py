"""
Integration tests for NACK POS API.
"""
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import status

from apps.billing.models import PaymentIntent
from apps.billing.services.billing_service import BillingService
from apps.events.models import Ticket, TicketStatus
from apps.orders.models import Order, OrderStatus, Sale
from apps.sync.models import OfflineTask
from apps.team.models import TeamMember, TeamRole


def cart_line(product, quantity, is_formula=False):
    return {'product_id': str(product.id), 'quantity': quantity, 'is_formula': is_formula}


class TestAuthenticationAPI:
    """Test authentication API endpoints."""

    def test_login_success(self, api_client, owner, establishment):
        """Test successful login."""
        url = reverse('api:login')
        data = {
            'username': 'owner_test',
            'password': 'test_owner_123'
        }

        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access_token' in response.data['tokens']
        assert 'refresh_token' in response.data['tokens']
        assert response.data['establishment']['name'] == 'Le Test Bar'
        assert response.data['billing']['is_in_trial'] is True

    def test_login_invalid_credentials(self, api_client):
        """Test login with invalid credentials."""
        url = reverse('api:login')
        data = {
            'username': 'invalid',
            'password': 'invalid'
        }

        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register(self, api_client):
        url = reverse('api:register')
        data = {
            'username': 'nouveau',
            'email': 'nouveau@bar.ga',
            'password': 'motdepasse123'
        }

        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['establishment'] is None
        assert response.data['billing']['trial_days_left'] == 7

    def test_refresh_token(self, api_client, owner):
        login = api_client.post(reverse('api:login'), {'username': 'owner_test', 'password': 'test_owner_123'})

        response = api_client.post(
            reverse('api:refresh_token'),
            {'refresh_token': login.data['tokens']['refresh_token']}
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access_token' in response.data

    def test_refresh_with_access_token_fails(self, api_client, owner):
        login = api_client.post(reverse('api:login'), {'username': 'owner_test', 'password': 'test_owner_123'})

        response = api_client.post(
            reverse('api:refresh_token'),
            {'refresh_token': login.data['tokens']['access_token']}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_endpoint_authenticated(self, jwt_owner_client, owner):
        """Test /me endpoint with authenticated owner."""
        url = reverse('api:me')

        response = jwt_owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['username'] == 'owner_test'

    def test_me_endpoint_unauthenticated(self, api_client):
        """Test /me endpoint without authentication."""
        url = reverse('api:me')

        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_as_agent(self, waiter_client, waiter):
        response = waiter_client.get(reverse('api:me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['member']['agent_code'] == 'AGT-WAIT01'

    def test_agent_login(self, api_client, waiter, establishment):
        response = api_client.post(reverse('api:agent_login'), {'agent_code': 'agt-wait01'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['member']['role'] == TeamRole.WAITER
        assert response.data['member']['dashboard_link'] == '/serveur/AGT-WAIT01'
        assert response.data['establishment'] == 'Le Test Bar'

    def test_agent_login_unknown_code(self, api_client):
        response = api_client.post(reverse('api:agent_login'), {'agent_code': 'AGT-NOPE00'})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_agent_header(self, api_client):
        api_client.credentials(HTTP_X_AGENT_CODE='AGT-NOPE00')

        response = api_client.get(reverse('api:product_list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_deactivated_agent_is_rejected(self, waiter_client, waiter):
        waiter.status = 'inactive'
        waiter.save()

        response = waiter_client.get(reverse('api:product_list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestEstablishmentAPI:

    def test_complete_profile_grants_credits(self, jwt_owner_client, owner):
        url = reverse('api:establishment')
        data = {'name': 'Chez Nack', 'establishment_type': 'restaurant', 'city': 'Libreville'}

        response = jwt_owner_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['welcome_credits_granted'] is True
        assert response.data['establishment']['is_complete'] is True
        assert BillingService.get_account(owner).event_credits == 2

    def test_missing_profile(self, jwt_owner_client):
        response = jwt_owner_client.get(reverse('api:establishment'))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reset_data(self, jwt_owner_client, beer):
        response = jwt_owner_client.post(reverse('api:reset_data'), {'scopes': ['stock']}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['reset'] == {'stock': 1}

    def test_reset_forbidden_for_staff(self, cashier_client):
        response = cashier_client.post(reverse('api:reset_data'), {'scopes': ['stock']}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestInventoryAPI:
    """Test inventory API endpoints."""

    def test_products_list_owner(self, jwt_owner_client, beer, soda):
        response = jwt_owner_client.get(reverse('api:product_list'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['results']) == 2

    def test_agents_only_see_active_products(self, waiter_client, beer, soda):
        soda.is_active = False
        soda.save()

        response = waiter_client.get(reverse('api:product_list'))

        assert response.status_code == status.HTTP_200_OK
        assert [p['name'] for p in response.data['results']] == ['Régab']

    def test_create_product(self, jwt_owner_client):
        data = {'name': 'Castel', 'category': 'biere', 'price': 800, 'cost': 500, 'quantity': 24}

        response = jwt_owner_client.post(reverse('api:product_list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['has_formula'] is False

    def test_formula_needs_price(self, jwt_owner_client):
        data = {'name': 'Castel', 'category': 'biere', 'price': 800, 'quantity': 24, 'formula_units': 6}

        response = jwt_owner_client.post(reverse('api:product_list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_waiter_cannot_create_product(self, waiter_client):
        data = {'name': 'Castel', 'category': 'biere', 'price': 800, 'quantity': 24}

        response = waiter_client.post(reverse('api:product_list'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_restock(self, jwt_owner_client, soda):
        url = reverse('api:restock', kwargs={'product_id': soda.id})

        response = jwt_owner_client.post(url, {'quantity': 12}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['quantity'] == 15

    def test_record_loss(self, jwt_owner_client, beer):
        data = {'product_id': str(beer.id), 'quantity': 2, 'reason': 'Casse'}

        response = jwt_owner_client.post(reverse('api:losses'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['value'] == 1200
        assert response.data['product_name'] == 'Régab'

    def test_loss_over_stock(self, jwt_owner_client, soda):
        data = {'product_id': str(soda.id), 'quantity': 10}

        response = jwt_owner_client.post(reverse('api:losses'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_low_stock(self, jwt_owner_client, beer, soda):
        response = jwt_owner_client.get(reverse('api:low_stock'))

        assert response.status_code == status.HTTP_200_OK
        assert [p['name'] for p in response.data] == ['Coca-Cola']


class TestOrdersAPI:
    """Test the waiter to cash desk flow."""

    def test_waiter_sends_order(self, waiter_client, beer, soda):
        data = {'table_number': '4', 'items': [cart_line(beer, 2), cart_line(soda, 1)]}

        response = waiter_client.post(reverse('api:create_order'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == OrderStatus.SENT
        assert response.data['agent_code'] == 'AGT-WAIT01'
        assert response.data['total'] == 2500

    def test_cashier_cannot_send_order(self, cashier_client, beer):
        data = {'table_number': '4', 'items': [cart_line(beer, 1)]}

        response = cashier_client.post(reverse('api:create_order'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_order_over_stock(self, waiter_client, soda):
        data = {'table_number': '4', 'items': [cart_line(soda, 5)]}

        response = waiter_client.post(reverse('api:create_order'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Stock insuffisant' in response.data['error']

    def test_cashier_pays_once(self, waiter_client, cashier_client, beer):
        created = waiter_client.post(
            reverse('api:create_order'),
            {'table_number': '4', 'items': [cart_line(beer, 2)]},
            format='json'
        )
        url = reverse('api:pay_order', kwargs={'order_id': created.data['id']})

        open_orders = cashier_client.get(reverse('api:open_orders'))
        assert [o['id'] for o in open_orders.data] == [created.data['id']]

        first = cashier_client.post(url, {'payment_method': 'cash', 'amount_received': 5000}, format='json')
        second = cashier_client.post(url, {'payment_method': 'cash', 'amount_received': 5000}, format='json')

        assert first.status_code == status.HTTP_200_OK
        assert first.data['change'] == 3000
        assert first.data['sale']['cashier_code'] == 'AGT-CASH01'
        assert second.status_code == status.HTTP_200_OK
        assert second.data['already_paid'] is True
        assert Sale.objects.count() == 1
        beer.refresh_from_db()
        assert beer.quantity == 18

    def test_cash_needs_amount(self, cashier_client, owner, beer):
        order = Order.objects.create(owner=owner, order_number=1, table_number='2', total=1000,
                                     items=[{'product_id': str(beer.id), 'name': 'Régab', 'price': 1000, 'quantity': 1}],
                                     status=OrderStatus.SENT)

        response = cashier_client.post(
            reverse('api:pay_order', kwargs={'order_id': order.id}),
            {'payment_method': 'cash'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_waiter_sees_own_orders(self, waiter_client, jwt_owner_client, beer):
        waiter_client.post(reverse('api:create_order'), {'table_number': '1', 'items': [cart_line(beer, 1)]}, format='json')
        jwt_owner_client.post(reverse('api:create_order'), {'table_number': '2', 'items': [cart_line(beer, 1)]}, format='json')

        response = waiter_client.get(reverse('api:order_list'))

        assert response.data['count'] == 1
        assert response.data['results'][0]['table_number'] == '1'

    def test_counter_sale_and_daily_total(self, cashier_client, beer):
        sale = cashier_client.post(
            reverse('api:counter_sale'),
            {'items': [cart_line(beer, 6, is_formula=True)], 'payment_method': 'card'},
            format='json'
        )

        assert sale.status_code == status.HTTP_201_CREATED
        assert sale.data['total'] == 5400

        total = cashier_client.get(reverse('api:daily_total'))

        assert total.data == {'total': 5400, 'count': 1, 'agent_code': 'AGT-CASH01'}

    def test_owner_notifications(self, waiter_client, jwt_owner_client, beer):
        waiter_client.post(reverse('api:create_order'), {'table_number': '7', 'items': [cart_line(beer, 1)]}, format='json')

        response = jwt_owner_client.get(reverse('api:notifications'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['message'] == 'Table 7 • 1x Régab'


class TestTeamAPI:

    def test_add_waiter_without_credit(self, jwt_owner_client):
        data = {'first_name': 'Marc', 'last_name': 'Obiang', 'phone': '+24107000000', 'role': TeamRole.WAITER}

        response = jwt_owner_client.post(reverse('api:team_members'), data, format='json')

        assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
        assert response.data['amount'] == 1000
        assert response.data['reference'] == 'Ajout membre'

    def test_add_waiter_with_credit(self, jwt_owner_client, owner):
        BillingService.add_member_credits(owner, 1)
        data = {'first_name': 'Marc', 'last_name': 'Obiang', 'phone': '+24107000000', 'role': TeamRole.WAITER}

        response = jwt_owner_client.post(reverse('api:team_members'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['agent_code'].startswith('AGT-')

    def test_list_by_role(self, jwt_owner_client, waiter, cashier):
        response = jwt_owner_client.get(reverse('api:team_members'), {'role': TeamRole.CASHIER})

        assert [m['agent_code'] for m in response.data] == ['AGT-CASH01']

    def test_toggle_and_remove(self, jwt_owner_client, waiter):
        toggle = jwt_owner_client.post(reverse('api:toggle_member', kwargs={'member_id': waiter.id}))
        assert toggle.data['status'] == 'inactive'

        removed = jwt_owner_client.delete(reverse('api:remove_member', kwargs={'member_id': waiter.id}))
        assert removed.status_code == status.HTTP_204_NO_CONTENT
        assert not TeamMember.objects.filter(id=waiter.id).exists()

    def test_assign_event(self, jwt_owner_client, event_agent):
        url = reverse('api:assign_event', kwargs={'member_id': event_agent.id})

        response = jwt_owner_client.post(url, {'event_id': None}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_event'] is None


class TestEventsAPI:

    def event_data(self, event):
        return {'title': 'Concert', 'date': str(event.date), 'time': '20:00', 'ticket_price': 3000}

    def test_create_event_without_credit(self, jwt_owner_client, event):
        response = jwt_owner_client.post(reverse('api:event_list'), self.event_data(event), format='json')

        assert response.status_code == status.HTTP_402_PAYMENT_REQUIRED
        assert response.data['amount'] == 2000

    def test_create_event_with_credit(self, jwt_owner_client, owner, event):
        BillingService.add_event_credits(owner, 1)

        response = jwt_owner_client.post(reverse('api:event_list'), self.event_data(event), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['location'] == 'Restaurant NACK'
        assert response.data['shareable_link'] == f"/event/{response.data['id']}"

    def test_public_page_and_reserve(self, api_client, event):
        page = api_client.get(reverse('api:public_event', kwargs={'event_id': event.id}))
        assert page.status_code == status.HTTP_200_OK
        assert page.data['remaining_places'] == 3

        response = api_client.post(
            reverse('api:public_reserve', kwargs={'event_id': event.id}),
            {'customer_name': 'Aline', 'customer_email': 'aline@test.com', 'quantity': 2},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_amount'] == 10000
        assert response.data['whatsapp_url'].startswith('https://wa.me/24177123456')
        assert Ticket.objects.get(id=response.data['ticket_id']).status == TicketStatus.RESERVED

    def test_door_sale(self, agent_client_door, event):
        response = agent_client_door.post(reverse('api:sell_ticket', kwargs={'event_id': event.id}), {}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['source'] == 'door'

    def test_participants(self, jwt_owner_client, event, paid_ticket):
        response = jwt_owner_client.get(reverse('api:participants', kwargs={'event_id': event.id}))

        assert response.data['count'] == 1
        assert response.data['checked_in'] == 0

    def test_ticket_pdf(self, jwt_owner_client, paid_ticket):
        response = jwt_owner_client.get(reverse('api:ticket_pdf', kwargs={'ticket_id': paid_ticket.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/pdf'
        assert response.content.startswith(b'%PDF')


class TestCheckInAPI:

    def test_scan_then_rescan(self, agent_client_door, paid_ticket):
        url = reverse('api:check_in')
        payload = f'{{"t":"{paid_ticket.id}","e":"{paid_ticket.event_id}"}}'

        first = agent_client_door.post(url, {'payload': payload}, format='json')
        second = agent_client_door.post(url, {'payload': payload}, format='json')

        assert first.status_code == status.HTTP_200_OK
        assert first.data['result'] == 'valid'
        assert first.data['customer_name'] == 'Aline'
        assert first.data['quantity'] == 2
        assert second.data['result'] == 'already_used'

        history = agent_client_door.get(reverse('api:scan_history'))
        assert sorted(record['result'] for record in history.data) == ['already_used', 'valid']

    def test_waiter_cannot_scan(self, waiter_client, paid_ticket):
        response = waiter_client.post(reverse('api:check_in'), {'payload': str(paid_ticket.id)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_agent_event(self, agent_client_door, event):
        response = agent_client_door.get(reverse('api:agent_event'))

        assert response.data['event']['id'] == str(event.id)
        assert response.data['checked_in'] == 0


class TestBillingAPI:

    @patch('apps.billing.services.billing_service.SingPayClient')
    def test_start_payment(self, client_class, jwt_owner_client, owner):
        client_class.return_value.start_payment.return_value = 'https://pay.singpay.ga/checkout/xyz'

        response = jwt_owner_client.post(reverse('api:payments'), {'kind': 'subscription'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == 2500
        assert response.data['reference'] == 'Abonnement'
        assert response.data['link'] == 'https://pay.singpay.ga/checkout/xyz'

    def test_confirm_payment(self, jwt_owner_client, owner):
        intent = PaymentIntent.objects.create(owner=owner, reference='Ajout membre', amount=1000)
        url = reverse('api:confirm_payment', kwargs={'intent_id': intent.id})

        jwt_owner_client.post(url)
        response = jwt_owner_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['payment']['status'] == 'paid'
        assert response.data['billing']['member_credits'] == 1

    def test_other_owner_payment(self, jwt_owner_client, other_owner):
        intent = PaymentIntent.objects.create(owner=other_owner, reference='Ajout membre', amount=1000)

        response = jwt_owner_client.post(reverse('api:confirm_payment', kwargs={'intent_id': intent.id}))

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestSyncAPI:

    def test_upload_replays_queue(self, waiter_client, beer):
        data = {
            'tasks': [
                {'type': 'add_order', 'payload': {'table_number': '3', 'items': [cart_line(beer, 2)]}},
            ]
        }

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.status_code == status.HTTP_202_ACCEPTED
        assert response.data['queued'] == 1
        assert response.data['processed'] == 1
        assert response.data['remaining'] == 0
        assert Order.objects.get().agent_code == 'AGT-WAIT01'

    def test_upload_blocked_task_stays_queued(self, waiter_client, soda):
        data = {
            'tasks': [
                {'type': 'add_order', 'payload': {'table_number': '3', 'items': [cart_line(soda, 10)]}},
                {'type': 'add_order', 'payload': {'table_number': '4', 'items': [cart_line(soda, 1)]}},
            ]
        }

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.data['processed'] == 0
        assert response.data['blocked'] is True
        assert response.data['remaining'] == 2

        queue = waiter_client.get(reverse('api:sync_status'))
        assert queue.data['size'] == 2
        assert queue.data['head']['payload']['table_number'] == '3'

    def test_upload_without_flush(self, waiter_client, beer):
        data = {
            'tasks': [{'type': 'add_order', 'payload': {'table_number': '3', 'items': [cart_line(beer, 1)]}}],
            'flush': False
        }

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.data == {'queued': 1, 'remaining': 1}
        assert OfflineTask.objects.count() == 1

    def test_unknown_task_type(self, waiter_client):
        data = {'tasks': [{'type': 'delete_everything', 'payload': {}}]}

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_waiter_cannot_queue_team_member(self, waiter_client, owner):
        data = {
            'tasks': [{
                'type': 'add_team_member',
                'payload': {'first_name': 'Eve', 'last_name': 'Test', 'phone': '+24100000099', 'role': 'caissier'}
            }]
        }

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'add_team_member' in response.data['error']
        assert not TeamMember.objects.filter(phone='+24100000099').exists()
        assert OfflineTask.objects.count() == 0

    def test_waiter_cannot_queue_payment(self, waiter_client, beer):
        waiter_client.post(
            reverse('api:create_order'),
            {'table_number': '2', 'items': [cart_line(beer, 1)]},
            format='json'
        )
        order = Order.objects.get()
        data = {
            'tasks': [
                {'type': 'add_order', 'payload': {'table_number': '3', 'items': [cart_line(beer, 1)]}},
                {'type': 'pay_order', 'payload': {'order_id': order.id, 'payment_method': 'cash', 'agent_code': 'AGT-CASH01'}},
            ]
        }

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert OfflineTask.objects.count() == 0
        order.refresh_from_db()
        assert order.status != OrderStatus.PAID

    def test_payload_agent_code_is_ignored(self, waiter_client, cashier, beer):
        data = {
            'tasks': [{
                'type': 'add_order',
                'payload': {'table_number': '3', 'items': [cart_line(beer, 1)], 'agent_code': 'AGT-CASH01'}
            }]
        }

        response = waiter_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.data['processed'] == 1
        assert Order.objects.get().agent_code == 'AGT-WAIT01'

    def test_owner_can_queue_team_member(self, jwt_owner_client, owner):
        data = {
            'tasks': [{
                'type': 'add_team_member',
                'payload': {'first_name': 'Eve', 'last_name': 'Test', 'phone': '+24100000099', 'role': 'agent-evenement'}
            }]
        }

        response = jwt_owner_client.post(reverse('api:sync_upload'), data, format='json')

        assert response.status_code == status.HTTP_202_ACCEPTED
        assert response.data['processed'] == 1
        assert TeamMember.objects.filter(owner=owner, phone='+24100000099').exists()


class TestReportsAPI:

    def test_dashboard(self, jwt_owner_client, cashier_client, beer):
        cashier_client.post(
            reverse('api:counter_sale'),
            {'items': [cart_line(beer, 2)], 'payment_method': 'card'},
            format='json'
        )

        response = jwt_owner_client.get(reverse('api:report_dashboard'))

        assert response.data['today']['ventes'] == 2000
        assert response.data['top_products'][0]['name'] == 'Régab'

    def test_unknown_period(self, jwt_owner_client):
        response = jwt_owner_client.get(reverse('api:report_sales'), {'period': 'year'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_csv_export(self, jwt_owner_client, cashier_client, beer):
        cashier_client.post(
            reverse('api:counter_sale'),
            {'items': [cart_line(beer, 1)], 'payment_method': 'card'},
            format='json'
        )

        response = jwt_owner_client.get(reverse('api:report_csv'), {'period': 'today'})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/csv')
        lines = response.content.decode('utf-8').splitlines()
        assert lines[0] == 'Date,Heure,Produits,Total (XAF),Agent'
        assert lines[1].endswith(',Régab x1,1000,AGT-CASH01')

    def test_reports_are_owner_only(self, cashier_client):
        response = cashier_client.get(reverse('api:report_dashboard'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
