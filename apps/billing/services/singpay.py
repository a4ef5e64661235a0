"""
SingPay payment gateway client.

The gateway returns a hosted payment page link; the browser is redirected
there and comes back to redirect_success or redirect_error.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway refuses a payment or answers without a link."""


class SingPayClient:
    """Thin client for the SingPay external payment endpoint."""

    EXT_PATH = '/v1/ext'

    def __init__(self, config: Optional[Dict[str, Any]] = None, transport: Optional[httpx.BaseTransport] = None):
        self.config = config or settings.SINGPAY
        self._transport = transport

        if not self.config.get('CLIENT_ID') or not self.config.get('CLIENT_SECRET'):
            raise PaymentGatewayError(
                "SingPay credentials not configured. "
                "Set SINGPAY_CLIENT_ID and SINGPAY_CLIENT_SECRET environment variables"
            )

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            'accept': '*/*',
            'Content-Type': 'application/json',
            'x-client-id': self.config['CLIENT_ID'],
            'x-client-secret': self.config['CLIENT_SECRET'],
            'x-wallet': self.config.get('WALLET', ''),
        }

    def build_body(
        self,
        amount: int,
        reference: str,
        redirect_success: str,
        redirect_error: str,
        logo_url: str = ''
    ) -> Dict[str, Any]:
        """JSON body expected by the gateway."""
        return {
            'portefeuille': self.config.get('WALLET', ''),
            'reference': reference,
            'redirect_success': redirect_success,
            'redirect_error': redirect_error,
            'amount': amount,
            'disbursement': self.config.get('DISBURSEMENT', ''),
            'logoURL': logo_url or self.config.get('LOGO_URL', ''),
            'isTransfer': False,
        }

    def start_payment(
        self,
        amount: int,
        reference: str,
        redirect_success: str,
        redirect_error: str,
        logo_url: str = ''
    ) -> str:
        """
        Open a payment on the gateway.

        Returns:
            The hosted payment page link

        Raises:
            PaymentGatewayError: on HTTP error, unreadable body or missing link
        """
        url = f"{self.config['BASE_URL'].rstrip('/')}{self.EXT_PATH}"
        body = self.build_body(amount, reference, redirect_success, redirect_error, logo_url)

        try:
            with httpx.Client(transport=self._transport, timeout=self.config.get('TIMEOUT', 30.0)) as client:
                response = client.post(url, json=body, headers=self._headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("SingPay payment refused", extra={
                'status_code': e.response.status_code,
                'reference': reference,
                'event_type': 'payment_gateway_error'
            })
            raise PaymentGatewayError(
                f"SingPay erreur {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("SingPay unreachable", extra={
                'error': str(e),
                'reference': reference,
                'event_type': 'payment_gateway_error'
            })
            raise PaymentGatewayError(f"SingPay unreachable: {e}") from e
        except ValueError as e:
            logger.error("SingPay returned an unreadable body", extra={
                'reference': reference,
                'event_type': 'payment_gateway_error'
            })
            raise PaymentGatewayError("Réponse SingPay illisible") from e

        link = data.get('link') if isinstance(data, dict) else None
        if not link:
            raise PaymentGatewayError("Lien de paiement manquant")

        logger.info("SingPay payment started", extra={
            'reference': reference,
            'amount': amount,
            'event_type': 'payment_started'
        })
        return link
