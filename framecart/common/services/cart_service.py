from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple, Union

from ..db.executor import QueryExecutor, QueryResult
from ..models.order import OrderStatus
from ..utils.dto import to_cart_view
from ..utils.language import lang_expr, resolve_lang
from ..utils.validators import coerce_numeric, ensure_positive_int
from .logging import log_event


MAT_SURCHARGE = Decimal("1.2")
CENTS = Decimal("0.01")
EMPTY_CART = {"status": "The cart is empty."}

CartView = Union[List[Dict[str, Any]], Dict[str, str]]


class CartError(ValueError):
    """Cart request that cannot be served; the message goes back to the client."""


@dataclass(frozen=True)
class CartIdentity:
    session_id: Optional[str]
    user_id: Optional[Any]


def round2(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_frame_price(base_price: Any, price_multiplier: Any, with_mat: bool = True) -> float:
    price = Decimal(str(base_price)) * Decimal(str(price_multiplier))
    if with_mat:
        price = price * MAT_SURCHARGE
    return float(round2(price))


def line_total(unit_price: Any, quantity: int) -> float:
    return float(round2(Decimal(str(unit_price)) * quantity))


# (alias, item expression, total expression) for the combined cart select
def _cart_columns(lang: str) -> List[Tuple[str, str, str]]:
    return [
        ("orderLineId", "ol.id", "NULL"),
        ("orderId", "ol.orderId", "id"),
        ("quantity", "ol.quantity", "totalQuantity"),
        ("unitPrice", "ol.unitPrice", "NULL"),
        ("totalPrice", "ol.totalPrice", "totalAmount"),
        ("withMat", "ol.withMat", "NULL"),
        ("created", "ol.created", "NULL"),
        ("animalId", "a.id", "NULL"),
        ("animalName", lang_expr("a.name", lang, "animalName"), "NULL"),
        ("animalSlug", "a.slug", "NULL"),
        ("imageAspectRatio", "a.imageAspectRatio", "NULL"),
        ("category", lang_expr("a.category", lang, "category"), "NULL"),
        ("frameSpecId", "fs.id", "NULL"),
        ("frameSpecName", lang_expr("fs.name", lang, "frameSpecName"), "NULL"),
        ("frameWidthCm", "fs.frameWidthCm", "NULL"),
        ("frameHeightCm", "fs.frameHeightCm", "NULL"),
        ("imageAreaWidthCm", "fs.imageAreaWidthCm", "NULL"),
        ("imageAreaHeightCm", "fs.imageAreaHeightCm", "NULL"),
        ("matOpeningWidthCm", "fs.matOpeningWidthCm", "NULL"),
        ("matOpeningHeightCm", "fs.matOpeningHeightCm", "NULL"),
        ("frameMaterialId", "fm.id", "NULL"),
        ("materialName", lang_expr("fm.name", lang, "materialName"), "NULL"),
        ("material", lang_expr("fm.material", lang, "material"), "NULL"),
        ("color", lang_expr("fm.color", lang, "color"), "NULL"),
        ("style", lang_expr("fm.style", lang, "style"), "NULL"),
        ("priceMultiplier", "fm.priceMultiplier", "NULL"),
        ("cssBackground", "fm.cssBackground", "NULL"),
        ("basePrice", "fp.basePrice", "NULL"),
        ("itemType", "'ITEM'", "itemType"),
    ]


def _with_alias(expr: str, alias: str) -> str:
    return expr if expr.endswith(f" AS {alias}") else f"{expr} AS {alias}"


def frame_cart_select(lang: Optional[str]) -> str:
    """One query: an ITEM row per order line, then the order's TOTAL row."""
    columns = _cart_columns(resolve_lang(lang))
    items = ", ".join(_with_alias(item, alias) for alias, item, _ in columns)
    totals = ", ".join(_with_alias(total, alias) for alias, _, total in columns)
    return f"""
        SELECT * FROM (
          SELECT {items}
          FROM orderLines ol
          JOIN animals a ON a.id = ol.animalId
          JOIN frameSpecifications fs ON fs.id = ol.frameSpecId
          JOIN frameMaterials fm ON fm.id = ol.frameMaterialId
          LEFT JOIN framePricing fp ON fp.frameSpecId = ol.frameSpecId
          WHERE ol.orderId = :orderId
          UNION
          SELECT {totals}
          FROM orderTotals
          WHERE id = :orderId
        ) AS cart
        ORDER BY
          CASE WHEN itemType = 'ITEM' THEN 0 ELSE 1 END,
          orderLineId
    """


OPEN = OrderStatus.OPEN.sql_condition()

FIND_OPEN_ORDER = f"""
    SELECT id FROM orders
    WHERE {OPEN} AND (sessionId = :sessionId OR userId = :userId)
    ORDER BY userId DESC, id DESC
    LIMIT 1
"""


class FrameCartService:
    """Framed-print cart stored in the orders/orderLines tables."""

    def __init__(self, executor: QueryExecutor):
        self._db = executor

    @staticmethod
    def _identity(session_id: Optional[str], user_id: Optional[Any]) -> CartIdentity:
        return CartIdentity(session_id or None, user_id if user_id not in ("", None) else None)

    @staticmethod
    def _check(result: QueryResult) -> QueryResult:
        if isinstance(result, dict) and "error" in result:
            raise CartError(result["error"])
        return result

    def _query(self, sql: str, parameters: Optional[Dict[str, Any]] = None) -> QueryResult:
        return self._check(self._db.execute(sql, parameters, "CART", None))

    def bind_session_to_user(self, identity: CartIdentity) -> None:
        """Stamp anonymous orders of this session with the logged-in user."""
        if identity.session_id and identity.user_id is not None:
            result = self._query(
                "UPDATE orders SET userId = :userId WHERE userId IS NULL AND sessionId = :sessionId",
                {"sessionId": identity.session_id, "userId": identity.user_id},
            )
            if result["changes"]:
                log_event("info", "cart.bound_to_user", user_id=identity.user_id, orders=result["changes"])

    def find_open_order(self, identity: CartIdentity) -> Optional[int]:
        rows = self._query(FIND_OPEN_ORDER, {"sessionId": identity.session_id, "userId": identity.user_id})
        return rows[0]["id"] if rows else None

    def _cart_view(self, order_id: int, lang: Optional[str]) -> List[Dict[str, Any]]:
        return to_cart_view(self._query(frame_cart_select(lang), {"orderId": order_id}))

    def unit_price(self, frame_spec_id: Any, frame_material_id: Any, with_mat: bool) -> float:
        rows = self._query(
            """
            SELECT fp.basePrice, fm.priceMultiplier
            FROM framePricing fp
            JOIN frameMaterials fm ON fm.id = :frameMaterialId
            WHERE fp.frameSpecId = :frameSpecId
            """,
            {"frameSpecId": frame_spec_id, "frameMaterialId": frame_material_id},
        )
        if len(rows) != 1:
            raise CartError("Invalid frame specification or material combination!")
        return calculate_frame_price(rows[0]["basePrice"], rows[0]["priceMultiplier"], with_mat)

    def add_item(self, *, session_id: Optional[str], user_id: Optional[Any], payload: Dict[str, Any], lang: Optional[str] = None) -> CartView:
        identity = self._identity(session_id, user_id)
        self.bind_session_to_user(identity)

        animal_id = payload.get("animalId")
        frame_spec_id = payload.get("frameSpecId")
        frame_material_id = payload.get("frameMaterialId")
        if not animal_id or not frame_spec_id or not frame_material_id:
            raise CartError("animalId, frameSpecId, and frameMaterialId are required!")
        with_mat = 0 if payload.get("withMat", True) in (False, "false", "0") else 1
        quantity = payload.get("quantity")
        quantity = 1 if quantity is None else ensure_positive_int(quantity, "quantity")

        unit_price = self.unit_price(frame_spec_id, frame_material_id, bool(with_mat))

        order_id = self.find_open_order(identity)
        if order_id is None:
            created = self._query(
                "INSERT INTO orders (sessionId, userId) VALUES (:sessionId, :userId)",
                {"sessionId": identity.session_id, "userId": identity.user_id},
            )
            order_id = created["lastInsertRowid"]
            log_event("info", "cart.order_created", order_id=order_id)

        config = {
            "orderId": order_id,
            "animalId": animal_id,
            "frameSpecId": frame_spec_id,
            "frameMaterialId": frame_material_id,
            "withMat": with_mat,
        }
        existing = self._query(
            """
            SELECT id, quantity FROM orderLines
            WHERE orderId = :orderId AND animalId = :animalId AND frameSpecId = :frameSpecId
              AND frameMaterialId = :frameMaterialId AND withMat = :withMat
            """,
            config,
        )
        if existing:
            # merged lines are repriced at the current unit price
            new_quantity = existing[0]["quantity"] + quantity
            self._query(
                "UPDATE orderLines SET quantity = :quantity, unitPrice = :unitPrice, totalPrice = :totalPrice WHERE id = :id",
                {
                    "quantity": new_quantity,
                    "unitPrice": unit_price,
                    "totalPrice": line_total(unit_price, new_quantity),
                    "id": existing[0]["id"],
                },
            )
        else:
            self._query(
                """
                INSERT INTO orderLines (orderId, animalId, frameSpecId, frameMaterialId, withMat, quantity, unitPrice, totalPrice)
                VALUES (:orderId, :animalId, :frameSpecId, :frameMaterialId, :withMat, :quantity, :unitPrice, :totalPrice)
                """,
                {**config, "quantity": quantity, "unitPrice": unit_price, "totalPrice": line_total(unit_price, quantity)},
            )
        return self._cart_view(order_id, lang)

    def get_cart(self, *, session_id: Optional[str], user_id: Optional[Any], lang: Optional[str] = None) -> CartView:
        identity = self._identity(session_id, user_id)
        self.bind_session_to_user(identity)
        order_id = self.find_open_order(identity)
        if order_id is None:
            return dict(EMPTY_CART)
        cart = self._cart_view(order_id, lang)
        return cart if cart else dict(EMPTY_CART)

    def update_item(self, *, session_id: Optional[str], user_id: Optional[Any], payload: Dict[str, Any], lang: Optional[str] = None) -> CartView:
        identity = self._identity(session_id, user_id)
        self.bind_session_to_user(identity)

        order_line_id = payload.get("orderLineId")
        quantity = coerce_numeric(payload.get("quantity"))
        if not order_line_id or isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
            raise CartError("orderLineId and quantity are required!")

        rows = self._query(
            f"""
            SELECT ol.id, ol.orderId, ol.unitPrice, o.sessionId, o.userId
            FROM orderLines ol
            JOIN orders o ON ol.orderId = o.id
            WHERE ol.id = :orderLineId AND {OrderStatus.OPEN.sql_condition('o')}
            """,
            {"orderLineId": order_line_id},
        )
        line = rows[0] if rows else None
        if line is None or not self._owns(identity, line):
            raise CartError("Order line not found or access denied!")

        if quantity <= 0:
            self._query("DELETE FROM orderLines WHERE id = :orderLineId", {"orderLineId": line["id"]})
        else:
            if int(quantity) != quantity:
                raise CartError("quantity must be a whole number")
            self._query(
                "UPDATE orderLines SET quantity = :quantity, totalPrice = :totalPrice WHERE id = :orderLineId",
                {
                    "quantity": int(quantity),
                    "totalPrice": line_total(line["unitPrice"], int(quantity)),
                    "orderLineId": line["id"],
                },
            )
        return self._cart_view(line["orderId"], lang)

    @staticmethod
    def _owns(identity: CartIdentity, line: Dict[str, Any]) -> bool:
        if identity.session_id is not None and line.get("sessionId") == identity.session_id:
            return True
        return identity.user_id is not None and line.get("userId") == identity.user_id

    def remove_item(self, *, session_id: Optional[str], user_id: Optional[Any], order_line_id: Any) -> Dict[str, str]:
        identity = self._identity(session_id, user_id)
        self.bind_session_to_user(identity)
        result = self._query(
            f"""
            DELETE FROM orderLines
            WHERE id = :orderLineId
            AND orderId IN (
              SELECT id FROM orders
              WHERE {OPEN} AND (sessionId = :sessionId OR userId = :userId)
            )
            """,
            {"orderLineId": order_line_id, "sessionId": identity.session_id, "userId": identity.user_id},
        )
        if result["changes"] == 0:
            raise CartError("Item not found or access denied!")
        return {"status": "Item removed from cart."}

    def clear_cart(self, *, session_id: Optional[str], user_id: Optional[Any]) -> Dict[str, str]:
        identity = self._identity(session_id, user_id)
        self.bind_session_to_user(identity)
        order_id = self.find_open_order(identity)
        if order_id is not None:
            self._query("DELETE FROM orderLines WHERE orderId = :orderId", {"orderId": order_id})
        return dict(EMPTY_CART)
