"""
Django management command to seed the database with demo data.
Creates an owner with an establishment, a menu, a team and an event.
"""
from datetime import time, timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from apps.billing.services.billing_service import BillingService
from apps.events.models import Event, Ticket, TicketStatus
from apps.inventory.models import Product, ProductCategory
from apps.orders.services.order_service import OrderService
from apps.team.models import TeamMember, TeamRole
from apps.team.services.team_service import TeamService
from apps.users.services.account_service import AccountService

User = get_user_model()

DEMO_USERNAME = 'demo'

PRODUCTS = [
    {'name': 'Régab 65cl', 'category': ProductCategory.BEER, 'price': 1000, 'cost': 600, 'quantity': 96,
     'formula_units': 6, 'formula_price': 900},
    {'name': 'Castel 65cl', 'category': ProductCategory.BEER, 'price': 1000, 'cost': 600, 'quantity': 72},
    {'name': 'Coca-Cola 33cl', 'category': ProductCategory.SOFT, 'price': 500, 'cost': 250, 'quantity': 48},
    {'name': 'Eau minérale', 'category': ProductCategory.SOFT, 'price': 500, 'cost': 200, 'quantity': 4},
    {'name': 'Vin rouge (verre)', 'category': ProductCategory.WINE, 'price': 2000, 'cost': 900, 'quantity': 30},
    {'name': 'Whisky (dose)', 'category': ProductCategory.SPIRIT, 'price': 2500, 'cost': 1200, 'quantity': 40},
    {'name': 'Mojito', 'category': ProductCategory.COCKTAIL, 'price': 3500, 'cost': 1500, 'quantity': 20},
    {'name': 'Poulet braisé', 'category': ProductCategory.FOOD, 'price': 5000, 'cost': 2500, 'quantity': 15},
]

TEAM = [
    {'first_name': 'Marc', 'last_name': 'Ondo', 'phone': '+24177000001', 'role': TeamRole.WAITER},
    {'first_name': 'Sarah', 'last_name': 'Mba', 'phone': '+24177000002', 'role': TeamRole.CASHIER},
    {'first_name': 'Paul', 'last_name': 'Nze', 'phone': '+24177000003', 'role': TeamRole.EVENT_AGENT},
]


class Command(BaseCommand):
    help = 'Seed database with demo data for NACK POS'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete the demo owner and everything it owns before seeding',
        )
        parser.add_argument(
            '--password',
            type=str,
            default='demo12345',
            help='Password of the demo owner (default: demo12345)',
        )
        parser.add_argument(
            '--with-orders',
            action='store_true',
            help='Also create a few table orders',
        )

    def handle(self, *args, **options):
        """Handle the seed command."""

        if options['clear']:
            self.clear_data()

        try:
            with transaction.atomic():
                owner = self.create_owner(options['password'])
                products = self.create_products(owner)
                members = self.create_team(owner)
                event = self.create_event(owner)
                self.assign_agents(owner, members, event)
                if options['with_orders']:
                    self.create_orders(owner, products, members)

        except Exception as e:
            raise CommandError(f'Error seeding data: {str(e)}')

        self.stdout.write(
            self.style.SUCCESS('Successfully seeded database with demo data!')
        )
        for member in TeamMember.objects.filter(owner=owner):
            self.stdout.write(f'  {member.get_role_display()}: {member.full_name} -> {member.dashboard_link}')

    def clear_data(self):
        """Clear existing demo data."""
        self.stdout.write('Clearing existing demo data...')
        deleted, _detail = User.objects.filter(username=DEMO_USERNAME).delete()
        self.stdout.write(self.style.WARNING(f'{deleted} rows deleted.'))

    def create_owner(self, password):
        self.stdout.write('Creating demo owner and establishment...')

        owner = User.objects.filter(username=DEMO_USERNAME).first()
        if owner is None:
            owner = AccountService.register_owner(
                username=DEMO_USERNAME,
                email='demo@nack.local',
                password=password,
                first_name='Demo',
                last_name='Gérant'
            )

        AccountService.complete_profile(owner, {
            'name': 'Le Maquis NACK',
            'establishment_type': 'bar',
            'city': 'Libreville',
            'address': 'Boulevard Triomphal',
            'phone': '+24174000000',
            'whatsapp_number': '+24174000000',
        })
        # Seats for the paid roles
        BillingService.add_member_credits(owner, 2)
        return owner

    def create_products(self, owner):
        self.stdout.write('Creating menu...')
        products = []
        for data in PRODUCTS:
            product, _created = Product.objects.get_or_create(
                owner=owner,
                name=data['name'],
                defaults={key: value for key, value in data.items() if key != 'name'}
            )
            products.append(product)
        return products

    def create_team(self, owner):
        self.stdout.write('Creating team...')
        members = {}
        for data in TEAM:
            member = TeamMember.objects.filter(owner=owner, phone=data['phone']).first()
            if member is None:
                member = TeamService.add_member(owner=owner, **data)
            members[data['role']] = member
        return members

    def create_event(self, owner):
        self.stdout.write('Creating event...')
        event = Event.objects.filter(owner=owner, title='Soirée Afro').first()
        if event is not None:
            return event

        event = Event.objects.create(
            owner=owner,
            title='Soirée Afro',
            description='DJ set et concert live',
            date=timezone.localdate() + timedelta(days=7),
            time=time(21, 0),
            ticket_price=5000,
            max_capacity=80
        )
        for name, quantity in [('Aline Moussavou', 2), ('Jean Obame', 1)]:
            Ticket.objects.create(
                owner=owner,
                event=event,
                customer_name=name,
                customer_email=f"{name.split()[0].lower()}@example.com",
                quantity=quantity,
                total_amount=quantity * event.ticket_price,
                status=TicketStatus.PAID
            )
            event.tickets_sold += quantity
        event.save(update_fields=['tickets_sold'])
        return event

    def assign_agents(self, owner, members, event):
        agent = members.get(TeamRole.EVENT_AGENT)
        if agent is not None:
            TeamService.assign_event(owner, agent.id, str(event.id))

    def create_orders(self, owner, products, members):
        self.stdout.write('Creating table orders...')
        waiter = members.get(TeamRole.WAITER)
        code = waiter.agent_code if waiter else ''
        for table, picks in [('1', products[:2]), ('4', products[2:4]), ('7', products[5:7])]:
            OrderService.create_order(
                owner=owner,
                table_number=table,
                items=[{'product_id': str(p.id), 'quantity': 1} for p in picks],
                agent_code=code
            )
