from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema

from models.Voucher import VoucherPaymentMethod, VoucherStatus
from settings import (
    ADMIN_EMAIL,
    BANK_ACCOUNT_HOLDER,
    BANK_BIC,
    BANK_IBAN,
    BANK_NAME,
    MAIL_USERNAME,
    MAIL_PASSWORD,
    MAIL_FROM,
    MAIL_PORT,
    MAIL_SERVER,
    MAIL_FROM_NAME,
    MAIL_SUPPRESS_SEND,
    MAIL_TLS,
    MAIL_SSL,
    SITE_URL,
    USE_CREDENTIALS,
)

GERMAN_MONTHS = [
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
]

conf_static = ConnectionConfig(
    MAIL_USERNAME=MAIL_USERNAME,
    MAIL_PASSWORD=MAIL_PASSWORD,
    MAIL_FROM=MAIL_FROM,
    MAIL_PORT=MAIL_PORT,
    MAIL_SERVER=MAIL_SERVER,
    MAIL_FROM_NAME=MAIL_FROM_NAME,
    MAIL_STARTTLS=MAIL_TLS,
    MAIL_SSL_TLS=MAIL_SSL,
    USE_CREDENTIALS=USE_CREDENTIALS,
    SUPPRESS_SEND=1 if MAIL_SUPPRESS_SEND else 0,
    TEMPLATE_FOLDER=Path(__file__).parent / "mail_templates",
)


def get_mailer() -> FastMail:
    return FastMail(conf_static)


def format_german_date(moment: datetime) -> str:
    """1. Januar 2027"""
    return f"{moment.day}. {GERMAN_MONTHS[moment.month - 1]} {moment.year}"


async def try_send_email(recipient: str, name: str = "User"):
    """
    Send a plain test message to check the SMTP settings.
    """
    fm = get_mailer()
    await fm.send_message(
        message=MessageSchema(
            subject="Test email",
            recipients=[recipient],
            template_body={"name": name},
            subtype="html",
        ),
        template_name="test_email.html",
    )


async def send_voucher_confirmation_email(
    recipient: str,
    customer_name: str,
    voucher_code: str,
    amount: Decimal,
    payment_method: str,
    status: str,
    valid_until: datetime,
    order_number: Optional[str] = None,
):
    """
    Send the purchase confirmation to the customer, with a copy to the studio.

    Pending bank transfer vouchers get the bank details, the voucher code is the
    payment reference.
    """
    is_bank_transfer = payment_method == VoucherPaymentMethod.BANK_TRANSFER
    fm = get_mailer()
    await fm.send_message(
        message=MessageSchema(
            subject=f"Gutschein-Bestätigung: {voucher_code}",
            recipients=[recipient],
            bcc=[ADMIN_EMAIL] if ADMIN_EMAIL else [],
            template_body={
                "logo_url": f"{SITE_URL}/images/emaillogo.webp",
                "customer_name": customer_name,
                "voucher_code": voucher_code,
                "amount": f"{Decimal(amount):.2f}",
                "payment_method": "Banküberweisung" if is_bank_transfer else "PayPal",
                "is_active": status == VoucherStatus.ACTIVE,
                "status": "Aktiv"
                if status == VoucherStatus.ACTIVE
                else "Ausstehend (Wird nach Zahlungseingang aktiviert)",
                "order_number": order_number,
                "valid_until": format_german_date(valid_until),
                "is_bank_transfer": is_bank_transfer,
                "bank_name": BANK_NAME,
                "bank_account_holder": BANK_ACCOUNT_HOLDER,
                "bank_iban": BANK_IBAN,
                "bank_bic": BANK_BIC,
            },
            subtype="html",
        ),
        template_name="voucher_confirmation.html",
    )


async def send_newsletter_confirmation_email(recipient: str):
    fm = get_mailer()
    await fm.send_message(
        message=MessageSchema(
            subject="Newsletter-Anmeldung bestätigt - Sponk Keramik",
            recipients=[recipient],
            template_body={"logo_url": f"{SITE_URL}/images/emaillogo.webp"},
            subtype="html",
        ),
        template_name="newsletter_confirmation.html",
    )
