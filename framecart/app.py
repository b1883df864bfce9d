"""Frame cart Flask application."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .common.db.executor import QueryExecutor
from .common.db.schema import install_schema
from .common.db.session import Database
from .common.services.access_filter import AccessFilter
from .common.services.cart_service import FrameCartService
from .common.services.exchange_rate_service import ExchangeRateService
from .common.services.resource_service import ResourceService
from .config import FrameCartConfig
from .middleware import LanguagePrefixMiddleware
from .routes import api, cart


logger = logging.getLogger(__name__)


def _configure_logging(config: FrameCartConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if config.log_queries:
        logging.getLogger("framecart.events").setLevel(logging.DEBUG)


def create_app(config: Optional[FrameCartConfig] = None) -> Flask:
    config = config or FrameCartConfig.load()
    _configure_logging(config)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    app.config["FRAMECART_CONFIG"] = config

    database = Database(config.database_url)
    install_schema(database.connection)
    executor = QueryExecutor(
        database,
        password_fields=config.password_fields,
        log_queries=config.log_queries,
    )

    components = {
        "database": database,
        "executor": executor,
        "resource_service": ResourceService(
            executor,
            user_table=config.user_table,
            user_role_field=config.user_role_field,
        ),
        "access_filter": AccessFilter(
            owner_field=config.acl_owner_field,
            user_table=config.user_table,
            password_fields=config.password_fields,
            admin_roles=config.admin_roles,
        ),
        "cart_service": FrameCartService(executor),
        "exchange_rates": ExchangeRateService(
            config.exchange_rates_url,
            config.exchange_currencies,
            config.http_timeout,
        ),
    }
    app.extensions["framecart_components"] = components

    # cart routes first so their paths are never read as table names
    app.register_blueprint(cart.cart_bp, url_prefix=config.rest_prefix)
    app.register_blueprint(api.api_bp, url_prefix=config.rest_prefix)

    @app.errorhandler(HTTPException)
    def json_http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code or 400

    app.wsgi_app = LanguagePrefixMiddleware(app.wsgi_app, config.rest_prefix)
    logger.info("Frame cart api mounted at %s", config.rest_prefix)
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=3000, debug=False)


if __name__ == "__main__":
    main()
