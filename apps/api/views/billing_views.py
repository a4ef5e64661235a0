"""
Billing API views for NACK POS.
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.api.permissions import IsOwner
from apps.api.serializers import CreatePaymentSerializer, PaymentIntentSerializer
from apps.billing.models import PaymentIntent
from apps.billing.services.billing_service import (
    BillingError, BillingService, PaymentRequired,
    REFERENCE_EVENT, REFERENCE_MEMBER, REFERENCE_SUBSCRIPTION
)
from apps.billing.services.singpay import PaymentGatewayError

logger = logging.getLogger(__name__)

PRODUCTS = {
    'subscription': ('SUBSCRIPTION_PRICE', REFERENCE_SUBSCRIPTION),
    'member': ('MEMBER_PRICE', REFERENCE_MEMBER),
    'event': ('EVENT_PRICE', REFERENCE_EVENT),
}


def payment_required_response(error: PaymentRequired) -> Response:
    """402 telling the client what to pay to unlock the action."""
    return Response(
        {
            'error': str(error),
            'payment_required': True,
            'amount': error.amount,
            'reference': error.reference,
        },
        status=status.HTTP_402_PAYMENT_REQUIRED
    )


def _owned_intent(request, intent_id):
    try:
        return PaymentIntent.objects.get(id=intent_id, owner=request.user)
    except (PaymentIntent.DoesNotExist, ValidationError):
        return None


@api_view(['GET'])
@permission_classes([IsOwner])
def billing_state(request):
    """
    Trial, subscription and credit balances of the owner.
    """
    return Response(BillingService.get_state(request.user))


@api_view(['GET', 'POST'])
@permission_classes([IsOwner])
def payments(request):
    """
    List the owner's payments, or start a new one on the gateway.
    """
    if request.method == 'GET':
        intents = PaymentIntent.objects.filter(owner=request.user)[:50]
        return Response(PaymentIntentSerializer(intents, many=True).data)

    serializer = CreatePaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    price_key, reference = PRODUCTS[serializer.validated_data['kind']]
    try:
        intent = BillingService.create_payment(
            owner=request.user,
            amount=settings.NACK[price_key],
            reference=reference,
            redirect_success=serializer.validated_data.get('redirect_success', ''),
            redirect_error=serializer.validated_data.get('redirect_error', '')
        )
    except PaymentGatewayError as e:
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
    except BillingError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(PaymentIntentSerializer(intent).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsOwner])
def confirm_payment(request, intent_id):
    """
    Called when the gateway redirects back on success.
    Applying the same payment twice has no further effect.
    """
    intent = _owned_intent(request, intent_id)
    if intent is None:
        return Response({'error': 'Paiement introuvable'}, status=status.HTTP_404_NOT_FOUND)

    intent = BillingService.confirm_payment(intent.id)
    return Response({
        'payment': PaymentIntentSerializer(intent).data,
        'billing': BillingService.get_state(request.user),
    })


@api_view(['POST'])
@permission_classes([IsOwner])
def fail_payment(request, intent_id):
    """
    Called when the gateway redirects back on error.
    """
    intent = _owned_intent(request, intent_id)
    if intent is None:
        return Response({'error': 'Paiement introuvable'}, status=status.HTTP_404_NOT_FOUND)

    intent = BillingService.fail_payment(intent.id)
    logger.info("Payment failed", extra={
        'owner_id': request.user.id,
        'payment_id': str(intent.id),
        'event_type': 'payment_failed'
    })
    return Response(PaymentIntentSerializer(intent).data)
