"""
Business content builders, one per gateway operation.

Each builder maps a validated request model to the plaintext biz_content
dict that is encrypted into the parameter set. Fields left unset are omitted.
"""

from typing import Any

from paypay.models import PayeeType, PaymentMethod, ProductCode
from paypay.schemas import (
    AccountTransferRequest,
    PaymentRequest,
    QueryRequest,
    RefundRequest,
    format_amount,
)

DEFAULT_TIMEOUT_EXPRESS = "30m"


def _compact(content: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in content.items() if v is not None}


def _payment_content(payment: PaymentRequest, product_code: ProductCode) -> dict[str, Any]:
    return {
        "out_trade_no": payment.request_no,
        "total_amount": format_amount(payment.amount),
        "subject": payment.subject,
        "body": payment.body or "",
        "timeout_express": payment.timeout_express or DEFAULT_TIMEOUT_EXPRESS,
        "product_code": product_code.value,
    }


def app_payment_content(payment: PaymentRequest) -> dict[str, Any]:
    return _payment_content(payment, ProductCode.quick_msecurity_pay)


def multicaixa_express_content(payment: PaymentRequest) -> dict[str, Any]:
    content = _payment_content(payment, ProductCode.multicaixa_express)
    content["payment_method"] = {"type": PaymentMethod.multicaixa_express.value}
    return content


def reference_payment_content(payment: PaymentRequest) -> dict[str, Any]:
    content = _payment_content(payment, ProductCode.reference_pay)
    content["payment_method"] = {"type": PaymentMethod.reference.value}
    return content


def trade_lookup_content(query: QueryRequest) -> dict[str, Any]:
    """Shared by query and close."""
    return _compact({"out_trade_no": query.out_trade_no, "trade_no": query.trade_no})


def refund_content(refund: RefundRequest) -> dict[str, Any]:
    return _compact(
        {
            "out_trade_no": refund.out_trade_no,
            "trade_no": refund.trade_no,
            "refund_amount": format_amount(refund.refund_amount),
            "refund_reason": refund.refund_reason or "",
            "out_request_no": refund.out_request_no,
        }
    )


def transfer_content(
    transfer: AccountTransferRequest, payee_type: PayeeType | str = PayeeType.paypay_userid
) -> dict[str, Any]:
    if isinstance(payee_type, PayeeType):
        payee_type = payee_type.value
    return _compact(
        {
            "out_biz_no": transfer.out_biz_no,
            "payee_type": payee_type,
            "payee_account": transfer.payee_account,
            "amount": format_amount(transfer.amount),
            "payer_show_name": transfer.payer_show_name,
            "payee_real_name": transfer.payee_real_name,
            "remark": transfer.remark,
        }
    )
