"""Frame cart application settings."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

LANG_PATTERN = re.compile(r"^[a-z]{2}$")
DEFAULT_LANG = "en"


def validate_rest_prefix(value: Optional[str]) -> str:
    v = (value or "/api").strip()
    if not v.startswith("/"):
        raise ValueError("Invalid rest prefix: must start with '/'")
    v = v.rstrip("/")
    if not v:
        raise ValueError("Invalid rest prefix: the root path cannot hold the REST api")
    return v


def _split_list(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(x.strip() for x in value.split(",") if x.strip())
    return tuple(str(x).strip() for x in value if str(x).strip())


@dataclass
class FrameCartConfig:
    """Settings for the REST api and the frame cart."""

    secret_key: str = "dev_secret"
    database_url: str = "sqlite:///data/framecart.db"
    rest_prefix: str = "/api"
    log_level: str = "INFO"
    log_queries: bool = False
    user_table: str = "users"
    user_role_field: str = "role"
    password_fields: Tuple[str, ...] = ("password",)
    acl_owner_field: str = "userId"
    admin_roles: Tuple[str, ...] = ("admin",)
    exchange_rates_url: str = (
        "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest/v1/currencies/usd.json"
    )
    exchange_currencies: Tuple[str, ...] = ("nok", "sek")
    http_timeout: float = 10.0

    @classmethod
    def load(cls, settings_file: Optional[Path] = None) -> "FrameCartConfig":
        """Build settings from settings.json with environment fallbacks.

        Values in the settings file win over the environment, the same way
        the shop settings are handled. A broken settings file is fatal.
        """

        load_dotenv()
        path = settings_file or os.getenv("FRAMECART_SETTINGS")
        s: Dict[str, Any] = {}
        if path:
            path = Path(path)
            if not path.exists():
                raise ValueError(f"Settings file not found: {path}")
            s = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(s, dict):
                raise ValueError("Settings file must contain a JSON object")
            logger.info("Loaded settings from %s", path)

        def pick(key: str, env: str, default: Any) -> Any:
            if key in s:
                return s[key]
            return os.getenv(env, default)

        config = cls(
            secret_key=pick("secretKey", "SECRET_KEY", cls.secret_key),
            database_url=pick("databaseUrl", "DATABASE_URL", cls.database_url),
            rest_prefix=validate_rest_prefix(pick("restPrefix", "REST_PREFIX", cls.rest_prefix)),
            log_level=str(pick("logLevel", "LOG_LEVEL", cls.log_level)).upper(),
            log_queries=str(pick("logQueries", "LOG_QUERIES", "0")).lower() in ("1", "true", "yes"),
            user_table=pick("userTableName", "USER_TABLE", cls.user_table),
            user_role_field=pick("userRoleField", "USER_ROLE_FIELD", cls.user_role_field),
            password_fields=_split_list(pick("passwordFieldNames", "PASSWORD_FIELDS", "password")),
            acl_owner_field=pick("aclOwnerField", "ACL_OWNER_FIELD", cls.acl_owner_field),
            admin_roles=_split_list(pick("adminRoles", "ADMIN_ROLES", "admin")),
            exchange_rates_url=pick("exchangeRatesUrl", "EXCHANGE_RATES_URL", cls.exchange_rates_url),
            exchange_currencies=_split_list(pick("exchangeCurrencies", "EXCHANGE_CURRENCIES", "nok,sek")),
            http_timeout=float(pick("httpTimeout", "HTTP_TIMEOUT", cls.http_timeout)),
        )
        return config
