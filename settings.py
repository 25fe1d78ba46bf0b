import os
from core.log import logger

if os.environ.get("ENVIRONTMENT") != "os":
    logger.info("load env from file")
    from dotenv import load_dotenv

    load_dotenv()
else:
    logger.info("load env from os")


def str_to_bool(string: str) -> bool:
    if string in ["true", "TRUE", "True", "1"]:
        return True
    elif string in ["false", "FALSE", "False", "0"]:
        return False
    else:
        raise Exception(
            f"{string} is not boolean, ex input true -> true, True, TRUE, ex input false -> false, False, FALSE"
        )


# Environtment
ENVIRONTMENT = os.environ.get("ENVIRONTMENT")

# Deployment mode
DEPLOYMENT_MODE = os.environ.get("DEPLOYMENT_MODE", "development")

# JWT conf
SECRET_KEY = os.environ.get("SECRET_KEY", "sponk_secret")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 30)
if ACCESS_TOKEN_EXPIRE_MINUTES is not None:
    ACCESS_TOKEN_EXPIRE_MINUTES = int(ACCESS_TOKEN_EXPIRE_MINUTES)
REFRESH_TOKEN_EXPIRE_MINUTES = os.environ.get("REFRESH_TOKEN_EXPIRE_MINUTES", 60)
if REFRESH_TOKEN_EXPIRE_MINUTES is not None:
    REFRESH_TOKEN_EXPIRE_MINUTES = int(REFRESH_TOKEN_EXPIRE_MINUTES)
ACCESS_TOKEN_COOKIE_NAME = os.environ.get("ACCESS_TOKEN_COOKIE_NAME", "access_token")

# Timezone
TZ = os.environ.get("TZ", "Europe/Berlin")

# Database conf, DATABASE_URL wins over the postgres parts
POSTGRES_USER = os.environ.get("POSTGRES_USER")
POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD")
POSTGRES_HOST = os.environ.get("POSTGRES_HOST")
POSTGRES_PORT = os.environ.get("POSTGRES_PORT")
POSTGRES_DATABASE = os.environ.get("POSTGRES_DATABASE")
DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    f"postgresql+psycopg://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DATABASE}",
)

FRONTEND_BASE_URL = os.environ.get("FRONTEND_BASE_URL", "http://localhost:3000")
API_BASE_URL = os.environ.get("API_BASE_URL", FRONTEND_BASE_URL)

# PayPal
PAYPAL_CLIENT_ID = os.environ.get("PAYPAL_CLIENT_ID")
PAYPAL_CLIENT_SECRET = os.environ.get("PAYPAL_CLIENT_SECRET")
PAYPAL_API_URL = os.environ.get("PAYPAL_API_URL", "https://api-m.sandbox.paypal.com")
PAYPAL_CURRENCY = os.environ.get("PAYPAL_CURRENCY", "EUR")
PAYPAL_BRAND_NAME = os.environ.get("PAYPAL_BRAND_NAME", "Sponk Keramik")
PAYPAL_TIMEOUT_SECONDS = float(os.environ.get("PAYPAL_TIMEOUT_SECONDS", "30"))

# Voucher
VOUCHER_VALIDITY_MONTHS = int(os.environ.get("VOUCHER_VALIDITY_MONTHS", "12"))
VOUCHER_CODE_MAX_ATTEMPTS = int(os.environ.get("VOUCHER_CODE_MAX_ATTEMPTS", "5"))

# Bank transfer details shown on pending vouchers
BANK_NAME = os.environ.get("BANK_NAME", "Commerzbank")
BANK_ACCOUNT_HOLDER = os.environ.get("BANK_ACCOUNT_HOLDER", "Sponk Keramik")
BANK_IBAN = os.environ.get("BANK_IBAN", "")
BANK_BIC = os.environ.get("BANK_BIC", "")

# MAIL conf
MAIL_USERNAME = os.environ.get("MAIL_USERNAME", "")
MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD", "")
MAIL_FROM = os.environ.get("MAIL_FROM", "noreply@sponkkeramik.de")
MAIL_PORT = int(os.environ.get("MAIL_PORT", "465"))
MAIL_SERVER = os.environ.get("MAIL_SERVER", "")
MAIL_FROM_NAME = os.environ.get("MAIL_FROM_NAME", "Sponk Keramik")
MAIL_TLS = str_to_bool(os.environ.get("MAIL_TLS", "False"))
MAIL_SSL = str_to_bool(os.environ.get("MAIL_SSL", "True"))
USE_CREDENTIALS = str_to_bool(os.environ.get("USE_CREDENTIALS", "True"))
MAIL_SUPPRESS_SEND = str_to_bool(os.environ.get("MAIL_SUPPRESS_SEND", "False"))
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "sponkkeramik@gmail.com")
SITE_URL = os.environ.get("SITE_URL", "https://www.sponkkeramik.de")
