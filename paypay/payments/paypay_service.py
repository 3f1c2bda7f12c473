"""
PayPay Gateway Client

One method per gateway operation. Each call builds the operation's
biz_content, encrypts it into a parameter set, signs the set, sends it
through the transport and returns the verified PaymentResponse. Protocol and
crypto failures raise; business failures (code != "10000") are returned for
the caller to branch on.
"""

import itertools
import time
from datetime import UTC, datetime
from typing import Any, Callable, Mapping

import structlog

from paypay.core.logging import BusinessEvents
from paypay.core.metrics import Outcome, record_request
from paypay.core.settings import Settings
from paypay.errors import (
    DecryptionError,
    GatewayResponseError,
    InvalidSignatureError,
    TransportError,
)
from paypay.models import SIGN_TYPE, BizContentMode, Service
from paypay.payments import cipher, operations, signer
from paypay.payments.keys import load_private_key, load_public_key
from paypay.payments.notifications import parse_notification
from paypay.payments.transport import RequestsTransport, Transport
from paypay.payments.verification import verify_response
from paypay.schemas import (
    AccountTransferRequest,
    BankTransferRequest,
    PaymentRequest,
    PaymentResponse,
    QueryRequest,
    RefundRequest,
    TradeNotification,
)

log = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


_request_sequence = itertools.count(1)


def default_request_no(prefix: str) -> str:
    """``query_1714558830123_7``; the sequence keeps same-millisecond calls apart."""
    return f"{prefix}_{int(time.time() * 1000)}_{next(_request_sequence)}"


def format_timestamp(moment: datetime) -> str:
    """``2024-05-01T10:20:30.123Z``; naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"


def _coerce(model, value):
    if isinstance(value, model):
        return value
    return model.model_validate(value)


class PayPayClient:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: Transport | None = None,
        clock: Callable[[], datetime] | None = None,
        request_no_factory: Callable[[str], str] | None = None,
        biz_content_modes: Mapping[Service | str, BizContentMode | str] | None = None,
    ):
        """
        Args:
            settings: Client settings; read from the environment when omitted.
            transport: Object with ``send(url, body) -> dict``.
            clock: Source of request timestamps.
            request_no_factory: Builds request numbers for query/close when
                the caller does not pass one; receives the prefix.
            biz_content_modes: Per-service override of how response
                biz_content is decoded (default BizContentMode.auto).
        """
        self.settings = settings or Settings()
        self._private_key = load_private_key(self.settings.PAYPAY_PRIVATE_KEY)
        self._public_key = load_public_key(self.settings.PAYPAY_PUBLIC_KEY)
        self.transport = transport or RequestsTransport(timeout=self.settings.PAYPAY_TIMEOUT)
        self.clock = clock or utc_now
        self.request_no_factory = request_no_factory or default_request_no
        self.biz_content_modes = {
            Service(k).value: BizContentMode(v) for k, v in (biz_content_modes or {}).items()
        }

    @classmethod
    def from_keys(
        cls, partner_id: str, private_key: str, public_key: str, **kwargs
    ) -> "PayPayClient":
        """Build a client without environment settings.

        Keyword arguments named like Settings fields (``PAYPAY_BASE_URL``...)
        go to Settings; the rest go to the constructor.
        """
        overrides = {k: kwargs.pop(k) for k in list(kwargs) if k in Settings.model_fields}
        settings = Settings(
            PAYPAY_PARTNER_ID=partner_id,
            PAYPAY_PRIVATE_KEY=private_key,
            PAYPAY_PUBLIC_KEY=public_key,
            **overrides,
        )
        return cls(settings=settings, **kwargs)

    # Protocol primitives

    def encrypt_biz_content(self, content: dict[str, Any]) -> str:
        return cipher.encrypt(content, self._public_key)

    def decrypt_biz_content(self, encoded: str) -> dict[str, Any]:
        return cipher.decrypt(encoded, self._private_key)

    def sign(self, params: Mapping[str, Any]) -> str:
        return signer.sign(params, self._private_key)

    def verify_signature(self, params: Mapping[str, Any], signature: str) -> bool:
        return signer.verify(params, signature, self._public_key)

    def build_params(
        self,
        service: Service | str,
        biz_content: dict[str, Any],
        request_no: str,
        notify_url: str | None = None,
        return_url: str | None = None,
    ) -> dict[str, str]:
        """Assemble the signed parameter set for one request."""
        s = self.settings
        params = {
            "service": Service(service).value,
            "partner_id": s.PAYPAY_PARTNER_ID,
            "timestamp": format_timestamp(self.clock()),
            "charset": s.PAYPAY_CHARSET,
            "format": s.PAYPAY_FORMAT,
            "version": s.PAYPAY_VERSION,
            "language": s.PAYPAY_LANGUAGE,
            "request_no": request_no,
            "biz_content": self.encrypt_biz_content(biz_content),
        }
        if notify_url is not None:
            params["notify_url"] = notify_url
        if return_url is not None:
            params["return_url"] = return_url

        params["sign"] = self.sign(params)
        params["sign_type"] = SIGN_TYPE
        return params

    def execute(self, params: dict[str, str]) -> PaymentResponse:
        """Send a signed parameter set and verify the reply."""
        service = params["service"]
        request_no = params.get("request_no")
        mode = self.biz_content_modes.get(service, BizContentMode.auto)

        log.info(BusinessEvents.REQUEST, service=service, request_no=request_no)
        started = time.perf_counter()
        try:
            raw = self.transport.send(self.settings.PAYPAY_BASE_URL, params)
            response = verify_response(raw, self._public_key, self._private_key, mode)
        except TransportError:
            record_request(service, Outcome.TRANSPORT_ERROR)
            raise
        except InvalidSignatureError:
            record_request(service, Outcome.INVALID_SIGNATURE)
            raise
        except DecryptionError:
            record_request(service, Outcome.DECRYPTION_ERROR)
            raise
        except GatewayResponseError:
            record_request(service, Outcome.BAD_RESPONSE)
            raise
        duration = time.perf_counter() - started

        if response.is_success:
            record_request(service, Outcome.SUCCESS, duration)
            log.info(
                BusinessEvents.RESPONSE,
                service=service,
                request_no=request_no,
                code=response.code,
                duration=round(duration, 3),
            )
        else:
            record_request(service, Outcome.BUSINESS_FAILURE, duration)
            log.warning(
                BusinessEvents.BUSINESS_FAILURE,
                service=service,
                request_no=request_no,
                code=response.code,
                msg=response.msg,
                sub_code=response.sub_code,
            )
        return response

    # Payments

    def _pay(self, service: Service, payment: PaymentRequest, content: dict[str, Any]):
        params = self.build_params(
            service,
            content,
            payment.request_no,
            notify_url=payment.notify_url,
            return_url=payment.return_url,
        )
        return self.execute(params)

    def create_app_payment(self, payment: PaymentRequest | dict) -> PaymentResponse:
        """Pay through the PayPay APP; the response carries ``pay_url``."""
        payment = _coerce(PaymentRequest, payment)
        return self._pay(
            Service.trade_app_pay, payment, operations.app_payment_content(payment)
        )

    def create_multicaixa_express_payment(self, payment: PaymentRequest | dict) -> PaymentResponse:
        """Pay with MULTICAIXA Express; the response carries ``qr_code``."""
        payment = _coerce(PaymentRequest, payment)
        return self._pay(
            Service.trade_precreate, payment, operations.multicaixa_express_content(payment)
        )

    def create_reference_payment(self, payment: PaymentRequest | dict) -> PaymentResponse:
        """Pay by bank reference; the response carries ``reference``."""
        payment = _coerce(PaymentRequest, payment)
        return self._pay(
            Service.trade_precreate, payment, operations.reference_payment_content(payment)
        )

    # Trade management

    def query_payment(
        self, query: QueryRequest | dict, request_no: str | None = None
    ) -> PaymentResponse:
        query = _coerce(QueryRequest, query)
        params = self.build_params(
            Service.trade_query,
            operations.trade_lookup_content(query),
            request_no or self.request_no_factory("query"),
        )
        return self.execute(params)

    def refund_payment(self, refund: RefundRequest | dict) -> PaymentResponse:
        refund = _coerce(RefundRequest, refund)
        params = self.build_params(
            Service.trade_refund, operations.refund_content(refund), refund.out_request_no
        )
        return self.execute(params)

    def close_payment(
        self, query: QueryRequest | dict, request_no: str | None = None
    ) -> PaymentResponse:
        query = _coerce(QueryRequest, query)
        params = self.build_params(
            Service.trade_close,
            operations.trade_lookup_content(query),
            request_no or self.request_no_factory("close"),
        )
        return self.execute(params)

    # Transfers

    def transfer_to_bank_account(self, transfer: BankTransferRequest | dict) -> PaymentResponse:
        transfer = _coerce(BankTransferRequest, transfer)
        params = self.build_params(
            Service.fund_transfer,
            operations.transfer_content(transfer, transfer.payee_type),
            transfer.out_biz_no,
        )
        return self.execute(params)

    def transfer_to_paypay_account(
        self, transfer: AccountTransferRequest | dict
    ) -> PaymentResponse:
        transfer = _coerce(AccountTransferRequest, transfer)
        params = self.build_params(
            Service.fund_transfer, operations.transfer_content(transfer), transfer.out_biz_no
        )
        return self.execute(params)

    # Notifications

    def parse_notification(
        self, payload: Mapping[str, Any], mode: BizContentMode = BizContentMode.auto
    ) -> TradeNotification:
        """Verify an incoming trade notification with the configured keys."""
        return parse_notification(dict(payload), self._public_key, self._private_key, mode)
