from datetime import datetime
from decimal import Decimal
from email.header import decode_header, make_header
from unittest import IsolatedAsyncioTestCase
from zoneinfo import ZoneInfo

from core.email import (
    format_german_date,
    get_mailer,
    send_newsletter_confirmation_email,
    send_voucher_confirmation_email,
)


def subject_of(message) -> str:
    return str(make_header(decode_header(message["Subject"])))


def html_of(message) -> str:
    for part in message.walk():
        if part.get_content_type() == "text/html":
            return part.get_payload(decode=True).decode()
    return ""


class TestEmail(IsolatedAsyncioTestCase):
    def test_format_german_date(self):
        self.assertEqual(
            format_german_date(datetime(2027, 3, 1, tzinfo=ZoneInfo("Europe/Berlin"))),
            "1. März 2027",
        )

    async def test_voucher_confirmation_paypal(self):
        with get_mailer().record_messages() as outbox:
            await send_voucher_confirmation_email(
                recipient="kunde@example.com",
                customer_name="Erika Mustermann",
                voucher_code="SPONK-ABCD2345",
                amount=Decimal("50"),
                payment_method="paypal",
                status="active",
                valid_until=datetime(2027, 3, 15),
                order_number="5O190127TN364715T",
            )

        self.assertEqual(len(outbox), 1)
        message = outbox[0]
        self.assertEqual(subject_of(message), "Gutschein-Bestätigung: SPONK-ABCD2345")
        self.assertEqual(message["To"], "kunde@example.com")
        html = html_of(message)
        self.assertIn("Erika Mustermann", html)
        self.assertIn("50.00 €", html)
        self.assertIn("5O190127TN364715T", html)
        self.assertIn("15. März 2027", html)
        self.assertNotIn("IBAN", html)

    async def test_voucher_confirmation_bank_transfer(self):
        with get_mailer().record_messages() as outbox:
            await send_voucher_confirmation_email(
                recipient="kunde@example.com",
                customer_name="kunde",
                voucher_code="SPONK-WXYZ6789",
                amount=Decimal("75.50"),
                payment_method="bank_transfer",
                status="pending",
                valid_until=datetime(2027, 1, 31),
            )

        html = html_of(outbox[0])
        self.assertIn("Banküberweisung", html)
        self.assertIn("IBAN", html)
        self.assertIn("Ausstehend", html)
        self.assertNotIn("Bestellnummer", html)

    async def test_newsletter_confirmation(self):
        with get_mailer().record_messages() as outbox:
            await send_newsletter_confirmation_email(recipient="kunde@example.com")

        self.assertEqual(len(outbox), 1)
        self.assertEqual(outbox[0]["To"], "kunde@example.com")
        self.assertIn("Newsletter", subject_of(outbox[0]))
