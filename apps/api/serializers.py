"""
Serializers for NACK POS API.
"""
from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.billing.models import PaymentIntent
from apps.events.models import Event, ScanRecord, Ticket
from apps.inventory.models import Loss, Product
from apps.orders.models import Order, PaymentMethod, Sale
from apps.sync.models import OfflineTask, TaskType
from apps.team.models import TeamMember, TeamRole
from apps.users.models import Establishment, EstablishmentType
from apps.users.services.account_service import RESET_SCOPES


# User and Authentication Serializers

class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model."""

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'date_joined']
        read_only_fields = ['id', 'date_joined']


class EstablishmentSerializer(serializers.ModelSerializer):
    """Serializer for Establishment model."""
    is_complete = serializers.BooleanField(read_only=True)

    class Meta:
        model = Establishment
        fields = [
            'id', 'name', 'establishment_type', 'city', 'address', 'phone',
            'whatsapp_number', 'logo', 'is_complete', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class ProfileSerializer(serializers.Serializer):
    """Establishment fields sent when completing or editing the profile."""
    name = serializers.CharField(max_length=150, required=False)
    establishment_type = serializers.ChoiceField(choices=EstablishmentType.choices, required=False)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    whatsapp_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    logo = serializers.ImageField(required=False, allow_null=True)


class LoginSerializer(serializers.Serializer):
    """Serializer for user login."""
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        username = attrs.get('username')
        password = attrs.get('password')

        if username and password:
            user = authenticate(username=username, password=password)
            if user:
                if user.is_active:
                    attrs['user'] = user
                    return attrs
                else:
                    raise serializers.ValidationError(_('User account is disabled.'))
            else:
                raise serializers.ValidationError(_('Invalid username or password.'))
        else:
            raise serializers.ValidationError(_('Must include username and password.'))


class RegisterSerializer(serializers.Serializer):
    """Serializer for owner sign-up."""
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)


class TokenRefreshSerializer(serializers.Serializer):
    """Serializer for token refresh."""
    refresh_token = serializers.CharField()


class AgentLoginSerializer(serializers.Serializer):
    agent_code = serializers.CharField(max_length=10)


# Billing Serializers

class PaymentIntentSerializer(serializers.ModelSerializer):
    """Serializer for PaymentIntent model."""

    class Meta:
        model = PaymentIntent
        fields = ['id', 'reference', 'amount', 'status', 'link', 'paid_at', 'created_at']
        read_only_fields = fields


class CreatePaymentSerializer(serializers.Serializer):
    """What the owner is paying for: the price is fixed server side."""
    kind = serializers.ChoiceField(choices=[('subscription', 'subscription'), ('member', 'member'), ('event', 'event')])
    redirect_success = serializers.URLField(required=False, allow_blank=True)
    redirect_error = serializers.URLField(required=False, allow_blank=True)


# Inventory Serializers

class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model."""
    has_formula = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'category', 'description', 'price', 'cost', 'quantity',
            'low_stock_threshold', 'formula_units', 'formula_price', 'has_formula',
            'image', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        """A formula needs both its unit count and its price."""
        units = attrs.get('formula_units', getattr(self.instance, 'formula_units', None))
        price = attrs.get('formula_price', getattr(self.instance, 'formula_price', None))
        if (units is None) != (price is None):
            raise serializers.ValidationError(
                _('Formula units and formula price must be set together.')
            )
        return attrs


class RestockSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class LossSerializer(serializers.ModelSerializer):
    """Serializer for Loss model."""
    product_id = serializers.UUIDField(write_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    value = serializers.IntegerField(read_only=True)

    class Meta:
        model = Loss
        fields = ['id', 'product_id', 'product_name', 'quantity', 'reason', 'date', 'value', 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'date': {'required': False}}


# Orders Serializers

class CartItemSerializer(serializers.Serializer):
    """A cart line sent by the client. Prices are re-read server side."""
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    is_formula = serializers.BooleanField(default=False)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        value['product_id'] = str(value['product_id'])
        return value


class OrderSerializer(serializers.ModelSerializer):
    """Serializer for Order model."""
    items_summary = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'table_number', 'items', 'items_summary', 'total',
            'status', 'agent_code', 'paid_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CreateOrderSerializer(serializers.Serializer):
    table_number = serializers.CharField(max_length=20)
    items = CartItemSerializer(many=True, allow_empty=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class PaymentSerializer(serializers.Serializer):
    """Serializer for settling an order or a counter sale."""
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    amount_received = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    def validate(self, attrs):
        if attrs['payment_method'] == PaymentMethod.CASH and attrs.get('amount_received') is None:
            raise serializers.ValidationError({'amount_received': _('Montant reçu requis')})
        return attrs


class CounterSaleSerializer(PaymentSerializer):
    items = CartItemSerializer(many=True, allow_empty=False)


class SaleSerializer(serializers.ModelSerializer):
    """Serializer for Sale model."""
    order_number = serializers.IntegerField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = Sale
        fields = [
            'id', 'total', 'items', 'payment_method', 'source', 'order', 'order_number',
            'event', 'agent_code', 'cashier_code', 'amount_received', 'change_given',
            'created_at'
        ]
        read_only_fields = fields


# Events Serializers

class EventSerializer(serializers.ModelSerializer):
    """Serializer for Event model."""
    shareable_link = serializers.CharField(read_only=True)
    remaining_places = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)

    class Meta:
        model = Event
        fields = [
            'id', 'title', 'description', 'date', 'time', 'location', 'max_capacity',
            'ticket_price', 'currency', 'image', 'whatsapp_number', 'is_active',
            'tickets_sold', 'remaining_places', 'is_full', 'shareable_link',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'tickets_sold', 'created_at', 'updated_at']


class PublicEventSerializer(serializers.ModelSerializer):
    """What the public event page shows."""
    remaining_places = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)

    class Meta:
        model = Event
        fields = [
            'id', 'title', 'description', 'date', 'time', 'location', 'ticket_price',
            'currency', 'image', 'max_capacity', 'tickets_sold', 'remaining_places', 'is_full'
        ]
        read_only_fields = fields


class TicketSerializer(serializers.ModelSerializer):
    """Serializer for Ticket model."""
    qr_payload = serializers.JSONField(read_only=True)

    class Meta:
        model = Ticket
        fields = [
            'id', 'event', 'customer_name', 'customer_email', 'customer_phone',
            'quantity', 'total_amount', 'status', 'source', 'checked_in',
            'checked_in_at', 'checked_in_by', 'qr_payload', 'created_at'
        ]
        read_only_fields = fields


class ReserveTicketSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=150)
    customer_email = serializers.EmailField()
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1)


class ManualSaleSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)


class ScanSerializer(serializers.Serializer):
    payload = serializers.CharField(allow_blank=True)


class ScanRecordSerializer(serializers.ModelSerializer):
    """Serializer for ScanRecord model."""

    class Meta:
        model = ScanRecord
        fields = ['id', 'ticket_ref', 'customer_name', 'result', 'event', 'created_at']
        read_only_fields = fields


# Team Serializers

class TeamMemberSerializer(serializers.ModelSerializer):
    """Serializer for TeamMember model."""
    full_name = serializers.CharField(read_only=True)
    dashboard_link = serializers.CharField(read_only=True)

    class Meta:
        model = TeamMember
        fields = [
            'id', 'first_name', 'last_name', 'full_name', 'phone', 'email', 'role',
            'status', 'agent_code', 'dashboard_link', 'assigned_event',
            'last_connection', 'created_at'
        ]
        read_only_fields = fields


class AddTeamMemberSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20)
    email = serializers.EmailField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=TeamRole.choices)


class AssignEventSerializer(serializers.Serializer):
    event_id = serializers.UUIDField(allow_null=True)


# Sync Serializers

class OfflineTaskSerializer(serializers.ModelSerializer):
    """Serializer for OfflineTask model."""

    class Meta:
        model = OfflineTask
        fields = [
            'id', 'client_id', 'task_type', 'payload', 'agent_code', 'queued_at',
            'status', 'attempts', 'last_error', 'created_at'
        ]
        read_only_fields = fields


class UploadTaskSerializer(serializers.Serializer):
    """One task from a client's local queue."""
    id = serializers.UUIDField(required=False)
    type = serializers.ChoiceField(choices=TaskType.choices)
    payload = serializers.DictField()
    created_at = serializers.DateTimeField(required=False)


class UploadQueueSerializer(serializers.Serializer):
    tasks = UploadTaskSerializer(many=True)
    flush = serializers.BooleanField(default=True)


# Settings Serializers

class ResetDataSerializer(serializers.Serializer):
    scopes = serializers.ListField(
        child=serializers.ChoiceField(choices=[(scope, scope) for scope in RESET_SCOPES]),
        allow_empty=False
    )
