"""Schema installation: model tables plus the order totals view."""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ..models import Base


logger = logging.getLogger(__name__)

# one row per order that has lines, so an emptied cart has no TOTAL row
ORDER_TOTALS_SELECT = """
SELECT
  o.id AS id,
  SUM(ol.quantity) AS totalQuantity,
  ROUND(SUM(ol.totalPrice), 2) AS totalAmount,
  'TOTAL' AS itemType
FROM orders o
JOIN orderLines ol ON ol.orderId = o.id
GROUP BY o.id
"""


def install_schema(connection: Connection) -> None:
    """Create missing tables and views on the shared connection."""
    if connection.dialect.name == "sqlite":
        # must run outside a transaction to take effect
        connection.exec_driver_sql("PRAGMA foreign_keys = ON")
        connection.commit()
        create_view = "CREATE VIEW IF NOT EXISTS orderTotals AS"
    else:
        create_view = "CREATE OR REPLACE VIEW orderTotals AS"
    Base.metadata.create_all(connection)
    connection.execute(text(create_view + ORDER_TOTALS_SELECT))
    connection.commit()
    logger.info("Schema ready (%d tables)", len(Base.metadata.tables))
