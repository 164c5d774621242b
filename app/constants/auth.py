"""
Authentication Constants

JWT settings shared by the token issuer and the request authenticator.
"""

import logging

from decouple import config

logger = logging.getLogger(__name__)

INSECURE_SECRET_KEY = "change-me"

SECRET_KEY = config("SECRET_KEY", default=INSECURE_SECRET_KEY)
if SECRET_KEY == INSECURE_SECRET_KEY:
    logger.warning("Using default SECRET_KEY. Set SECRET_KEY before deploying.")

ALGORITHM = "HS256"

# Two weeks, matching the admin session lifetime
ACCESS_TOKEN_EXPIRE_MINUTES = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=20160, cast=int)

logger.debug("ACCESS_TOKEN_EXPIRE_MINUTES: %s", ACCESS_TOKEN_EXPIRE_MINUTES)
