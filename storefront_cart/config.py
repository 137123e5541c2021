"""
Configuration management for the storefront cart.
Loads settings from environment variables and AWS Secrets Manager.
"""
import os
import json
import logging
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from typing import Optional

logger = logging.getLogger(__name__)


class Config:
    """Application configuration"""

    # Cart settings
    CART_STORAGE_BACKEND: str = os.getenv("CART_STORAGE_BACKEND", "memory")
    CART_STORAGE_KEY: str = os.getenv("CART_STORAGE_KEY", "flipkartCloneCart")
    EMPTY_CART_MESSAGE: str = os.getenv(
        "EMPTY_CART_MESSAGE", "Your Cart is empty. Start shopping now!"
    )
    PLACEHOLDER_IMAGE_URL: str = os.getenv(
        "PLACEHOLDER_IMAGE_URL", "https://placehold.co/80x80/2874F0/ffffff?text=Product"
    )

    # Price display (en-IN grouping)
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₹")
    PRICE_MAX_FRACTION_DIGITS: int = int(os.getenv("PRICE_MAX_FRACTION_DIGITS", "3"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # AWS
    REGION: str = os.getenv("REGION", "ap-southeast-2")

    # Redis storage medium
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_AUTH_TOKEN: Optional[str] = os.getenv("REDIS_AUTH_TOKEN")
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    REDIS_SSL: bool = os.getenv("REDIS_SSL", "false").lower() in ("1", "true", "yes")

    # Redis connection settings
    REDIS_SOCKET_CONNECT_TIMEOUT: int = 5
    REDIS_SOCKET_TIMEOUT: int = 5
    REDIS_MAX_CONNECTIONS: int = 10

    @classmethod
    def redis_url(cls) -> str:
        """Build the redis-py connection URL"""
        scheme = "rediss" if cls.REDIS_SSL else "redis"
        auth = f":{cls.REDIS_AUTH_TOKEN}@" if cls.REDIS_AUTH_TOKEN else ""
        return f"{scheme}://{auth}{cls.REDIS_HOST}:{cls.REDIS_PORT}/{cls.REDIS_DB}"

    @classmethod
    def load_redis_secrets(cls) -> bool:
        """
        Fill Redis credentials from AWS Secrets Manager.

        The secret named by REDIS_SECRET_NAME is a JSON object with
        ``auth_token`` and optionally ``endpoint`` and ``port``. A token
        from the environment wins and skips the lookup.

        Returns:
            True if credentials were taken from the secret
        """
        secret_name = os.getenv("REDIS_SECRET_NAME")
        if cls.REDIS_AUTH_TOKEN or not secret_name:
            return False

        try:
            client = boto3.client("secretsmanager", region_name=cls.REGION)
            response = client.get_secret_value(SecretId=secret_name)
            secret_data = json.loads(response["SecretString"])
        except (BotoCoreError, ClientError, KeyError, ValueError) as e:
            logger.warning(f"Could not read Redis secret {secret_name}: {e}")
            return False

        cls.REDIS_AUTH_TOKEN = secret_data.get("auth_token")
        cls.REDIS_HOST = secret_data.get("endpoint", cls.REDIS_HOST)
        cls.REDIS_PORT = int(secret_data.get("port", cls.REDIS_PORT))
        # Token-protected managed Redis only accepts TLS
        cls.REDIS_SSL = cls.REDIS_SSL or bool(cls.REDIS_AUTH_TOKEN)
        return True
