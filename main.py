from typing import Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from core.exceptions import VoucherFlowError
from core.health_check import health_check
from core.log import logger
from core.responses import VoucherFlowFailure, common_response
from routes.auth import router as auth_router
from routes.course import router as course_router
from routes.newsletter import router as newsletter_router
from routes.paypal import router as paypal_router
from routes.voucher import router as voucher_router
from routes.waitlist import router as waitlist_router
from settings import FRONTEND_BASE_URL

health_check()

app = FastAPI(title="Sponk Keramik BE")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_BASE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(course_router)
app.include_router(paypal_router)
app.include_router(voucher_router)
app.include_router(waitlist_router)
app.include_router(newsletter_router)


def validation_error_response(
    exc: Union[ValidationError, RequestValidationError],
) -> JSONResponse:
    error_details = []
    for error in exc.errors():
        # request errors are located as ("body", "amount"), keep the field name
        loc = [part for part in error["loc"] if part not in ("body", "query", "path")]
        field = str(loc[-1]) if loc else "general"
        error_details.append({"field": field, "message": error["msg"]})

    return JSONResponse(
        status_code=422,
        content={
            "message": "Validation error on request data.",
            "errors": error_details,
        },
    )


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    return validation_error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    return validation_error_response(exc)


@app.exception_handler(VoucherFlowError)
async def voucher_flow_exception_handler(request: Request, exc: VoucherFlowError):
    # errors raised while resolving dependencies, e.g. missing PayPal credentials
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return common_response(VoucherFlowFailure(error=exc))


@app.get("/")
async def hello():
    logger.info("hello")
    return {"Hello": "from Sponk Keramik BE"}


@app.get("/health")
def health():
    return {"status": "ok"}
