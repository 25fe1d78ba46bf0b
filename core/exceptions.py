from typing import Any, Optional


class VoucherFlowError(Exception):
    """Base error of the voucher purchase flow, carries the HTTP status to answer with."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(VoucherFlowError):
    status_code = 500


class ValidationError(VoucherFlowError):
    status_code = 400


class UpstreamError(VoucherFlowError):
    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        upstream_status: Optional[int] = None,
    ) -> None:
        super().__init__(message, details)
        self.upstream_status = upstream_status


class PaymentNotCompletedError(VoucherFlowError):
    status_code = 400

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(message, details=f"Status: {status}")
        self.status = status


class PersistenceError(VoucherFlowError):
    """Voucher row could not be written after the payment was captured.

    The generated code and provider order id travel with the error so the
    caller can still show them and support can reconcile the payment.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        voucher_code: Optional[str] = None,
        paypal_order_id: Optional[str] = None,
        amount: Optional[Any] = None,
        valid_until: Optional[Any] = None,
        reconciliation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.voucher_code = voucher_code
        self.paypal_order_id = paypal_order_id
        self.amount = amount
        self.valid_until = valid_until
        self.reconciliation_id = reconciliation_id


class OrderOwnershipError(VoucherFlowError):
    """PayPal order already turned into a voucher of another user."""

    status_code = 409
