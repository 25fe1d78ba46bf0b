import typer

app = typer.Typer()


@app.command()
def create_admin_user():
    from core.helper import get_current_time_in_timezone
    from core.security import generate_hash_password
    from models import factory_session
    from repository.user import create_user
    from settings import TZ

    email = typer.prompt("email")
    password = typer.prompt("password", hide_input=True)

    with factory_session() as db:
        create_user(
            db=db,
            email=email,
            username=email,
            password=generate_hash_password(password),
            is_active=True,
            is_admin=True,
            created_at=get_current_time_in_timezone(TZ),
            is_commit=True,
        )
    typer.echo(f"Admin user {email} created")


@app.command()
def seed_courses():
    from seeders.initial_seeders import initial_seeders

    initial_seeders()


@app.command()
def activate_voucher(code: str):
    """Activate a pending bank transfer voucher once the money arrived."""
    from models import factory_session
    from models.Voucher import VoucherStatus
    from repository.voucher import get_voucher_by_code, update_voucher_status

    with factory_session() as db:
        voucher = get_voucher_by_code(db=db, code=code)
        if voucher is None:
            typer.echo(f"Voucher {code} not found", err=True)
            raise typer.Exit(code=1)
        if voucher.status != VoucherStatus.PENDING:
            typer.echo(f"Voucher {voucher.code} is {voucher.status}, not pending", err=True)
            raise typer.Exit(code=1)
        update_voucher_status(db=db, voucher=voucher, status=VoucherStatus.ACTIVE)
        typer.echo(f"Voucher {voucher.code} activated")


@app.command()
def list_reconciliations():
    from models import factory_session
    from repository.voucher_reconciliation import get_open_reconciliations

    with factory_session() as db:
        reconciliations = get_open_reconciliations(db=db)
        if not reconciliations:
            typer.echo("No open reconciliations")
            return
        for item in reconciliations:
            typer.echo(
                f"{item.id} code={item.voucher_code} order={item.paypal_order_id} "
                f"user={item.user_id} value={item.value} error={item.error}"
            )


@app.command()
def reconcile_vouchers():
    """Insert vouchers for captured payments that could not be stored."""
    from core.exceptions import VoucherFlowError
    from core.helper import get_current_time_in_timezone
    from core.voucher_service import reconcile_voucher
    from models import factory_session
    from repository.voucher_reconciliation import get_open_reconciliations
    from settings import TZ

    with factory_session() as db:
        failed = 0
        for item in get_open_reconciliations(db=db):
            item_id = item.id
            try:
                voucher = reconcile_voucher(
                    db=db, reconciliation=item, now=get_current_time_in_timezone(TZ)
                )
            except VoucherFlowError as e:
                failed += 1
                typer.echo(f"{item_id} not resolved: {e.message} {e.details or ''}", err=True)
                continue
            typer.echo(f"{item_id} resolved with voucher {voucher.code}")
        if failed:
            raise typer.Exit(code=1)


@app.command()
def send_test_email(email: str, name: str):
    from core.email import try_send_email
    import asyncio

    asyncio.run(try_send_email(recipient=email, name=name))


if __name__ == "__main__":
    app()
