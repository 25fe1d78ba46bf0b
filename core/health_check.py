from sqlalchemy.engine import make_url

from core.log import logger
from settings import DATABASE_URL, DEPLOYMENT_MODE, PAYPAL_API_URL, PAYPAL_CLIENT_ID
from models import db


def health_check():
    url = make_url(DATABASE_URL)
    logger.info(f"run app with deployment mode = {DEPLOYMENT_MODE}")
    logger.info(f"database backend = {url.get_backend_name()}")
    logger.info(f"database host = {url.host}")
    logger.info(f"database port = {url.port}")
    logger.info(f"paypal api = {PAYPAL_API_URL}")
    if not PAYPAL_CLIENT_ID:
        logger.warning("PayPal credentials not configured, payments will fail")
    logger.info("try echo database")
    with db() as session:
        logger.info(not session.connection().closed)
    logger.info("successfully connect to database")
