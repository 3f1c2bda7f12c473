"""
PayPay Schemas Module

Pydantic models for operation inputs and verified gateway outputs.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from paypay.errors import BusinessError
from paypay.models import SUCCESS_CODE, PayeeType, TradeStatus, map_status


def format_amount(amount: Decimal) -> str:
    """Render an amount as the gateway expects: ``1000``, ``12.5``."""
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


class PaymentRequest(BaseModel):
    """Input for APP, MULTICAIXA Express and reference payments."""

    request_no: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    currency: str = "AOA"
    subject: str
    body: Optional[str] = None
    notify_url: Optional[str] = None
    return_url: Optional[str] = None
    timeout_express: Optional[str] = None


class QueryRequest(BaseModel):
    """Identifies a trade for query and close; one of the two numbers is required."""

    out_trade_no: Optional[str] = None
    trade_no: Optional[str] = None

    @model_validator(mode="after")
    def _one_identifier(self):
        if not self.out_trade_no and not self.trade_no:
            raise ValueError("out_trade_no or trade_no is required")
        return self


class RefundRequest(BaseModel):
    out_trade_no: str
    trade_no: Optional[str] = None
    refund_amount: Decimal = Field(gt=0)
    refund_reason: Optional[str] = None
    out_request_no: str = Field(min_length=1)


class AccountTransferRequest(BaseModel):
    """Transfer to a PayPay wallet."""

    out_biz_no: str = Field(min_length=1)
    payee_account: str
    amount: Decimal = Field(gt=0)
    payer_show_name: Optional[str] = None
    payee_real_name: Optional[str] = None
    remark: Optional[str] = None


class BankTransferRequest(AccountTransferRequest):
    """Transfer to a bank account; payee_account is usually an IBAN."""

    payee_type: PayeeType | str


class TradeContent(BaseModel):
    """Structured biz_content of a verified response."""

    out_trade_no: Optional[str] = None
    trade_no: Optional[str] = None
    total_amount: Optional[str] = None
    seller_id: Optional[str] = None
    pay_url: Optional[str] = None
    qr_code: Optional[str] = None
    reference: Optional[str] = None
    trade_status: Optional[str] = None

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )


class PaymentResponse(BaseModel):
    """Gateway response; only ever built from a signature-verified payload."""

    code: str
    msg: str = ""
    sub_code: Optional[str] = None
    sub_msg: Optional[str] = None
    sign: str
    biz_content: Optional[TradeContent] = None

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE

    def raise_for_code(self) -> "PaymentResponse":
        """Raise BusinessError unless the gateway reported success."""
        if not self.is_success:
            raise BusinessError(self.code, self.msg, self.sub_code, self.sub_msg)
        return self


class TradeNotification(BaseModel):
    """Asynchronous trade status callback, after signature verification."""

    notify_id: Optional[str] = None
    notify_time: Optional[str] = None
    notify_type: Optional[str] = None
    out_trade_no: Optional[str] = None
    trade_no: Optional[str] = None
    trade_status: TradeStatus = TradeStatus.unknown
    total_amount: Optional[str] = None
    biz_content: Optional[dict[str, Any]] = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    @field_validator("trade_status", mode="before")
    @classmethod
    def _known_status(cls, value: Any) -> TradeStatus:
        return map_status(value)

    @property
    def is_paid(self) -> bool:
        return self.trade_status in (TradeStatus.trade_success, TradeStatus.trade_finished)
