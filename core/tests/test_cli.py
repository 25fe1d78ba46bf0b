from datetime import datetime
from decimal import Decimal
from unittest import TestCase
from unittest.mock import patch
from zoneinfo import ZoneInfo

from sqlalchemy import select
from typer.testing import CliRunner

from cli import app
from models import Base, db, engine
from models.User import User
from models.Voucher import Voucher
from repository import voucher_reconciliation as reconciliationRepo

BERLIN = ZoneInfo("Europe/Berlin")

runner = CliRunner()


class TestCli(TestCase):
    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = db()
        self.user = User(email="kunde@example.com", full_name="Erika Mustermann", is_active=True)
        self.db.add(self.user)
        self.db.commit()

        patcher = patch("models.factory_session", db)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def add_voucher(self, code: str, status: str) -> Voucher:
        voucher = Voucher(
            user_id=self.user.id,
            code=code,
            value=Decimal("80.00"),
            status=status,
            valid_until=datetime(2027, 10, 19, tzinfo=BERLIN),
            created_at=datetime(2026, 10, 19, tzinfo=BERLIN),
        )
        self.db.add(voucher)
        self.db.commit()
        return voucher

    def test_activate_voucher(self):
        voucher = self.add_voucher("SPONK-BANK2345", "pending")

        result = runner.invoke(app, ["activate-voucher", "sponk-bank2345"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Voucher SPONK-BANK2345 activated", result.output)
        self.db.expire_all()
        self.assertEqual(self.db.get(Voucher, voucher.id).status, "active")

    def test_activate_voucher_not_pending(self):
        self.add_voucher("SPONK-PAID2345", "active")

        result = runner.invoke(app, ["activate-voucher", "SPONK-PAID2345"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not pending", result.output)

        result = runner.invoke(app, ["activate-voucher", "SPONK-NONE2345"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not found", result.output)

    def test_reconcile_vouchers(self):
        # no user, has to be resolved by hand
        reconciliationRepo.create_reconciliation(
            db=self.db,
            voucher_code="SPONK-LOST2345",
            value=Decimal("50.00"),
            paypal_order_id="ORDER-1",
            valid_until=datetime(2027, 10, 19, tzinfo=BERLIN),
            created_at=datetime(2026, 10, 19, 9, 0, tzinfo=BERLIN),
        )
        reconciliationRepo.create_reconciliation(
            db=self.db,
            user_id=self.user.id,
            voucher_code="SPONK-MISS2345",
            value=Decimal("50.00"),
            paypal_order_id="ORDER-2",
            valid_until=datetime(2027, 10, 19, tzinfo=BERLIN),
            created_at=datetime(2026, 10, 19, 10, 0, tzinfo=BERLIN),
            error="database is locked",
        )

        result = runner.invoke(app, ["list-reconciliations"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("code=SPONK-MISS2345 order=ORDER-2", result.output)

        result = runner.invoke(app, ["reconcile-vouchers"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("has no user", result.output)
        self.assertIn("resolved with voucher SPONK-MISS2345", result.output)
        self.db.expire_all()
        voucher = self.db.execute(
            select(Voucher).where(Voucher.paypal_order_id == "ORDER-2")
        ).scalar()
        self.assertEqual(voucher.code, "SPONK-MISS2345")
        self.assertEqual(voucher.user_id, self.user.id)
        self.assertEqual(voucher.status, "active")
        open_items = reconciliationRepo.get_open_reconciliations(db=self.db)
        self.assertEqual([item.voucher_code for item in open_items], ["SPONK-LOST2345"])
