"""Frame cart routes, outside the generic table api because of their ownership checks."""

from __future__ import annotations

from flask import Blueprint

from .api import _components, current_identity, current_lang, read_json_body, send_json


cart_bp = Blueprint("framecart_cart", __name__, url_prefix="/api")


def _cart():
    return _components()["cart_service"]


@cart_bp.post("/add-frame-to-cart")
def add_frame_to_cart():
    payload, error = read_json_body()
    if error:
        return send_json({"error": error})
    session_id, user_id = current_identity()
    try:
        cart = _cart().add_item(session_id=session_id, user_id=user_id, payload=payload, lang=current_lang())
    except ValueError as exc:
        return send_json({"error": str(exc)})
    return send_json(cart)


@cart_bp.get("/frame-cart")
def get_frame_cart():
    session_id, user_id = current_identity()
    try:
        cart = _cart().get_cart(session_id=session_id, user_id=user_id, lang=current_lang())
    except ValueError as exc:
        return send_json({"error": str(exc)})
    return send_json(cart)


@cart_bp.put("/update-frame-in-cart")
def update_frame_in_cart():
    payload, error = read_json_body()
    if error:
        return send_json({"error": error})
    session_id, user_id = current_identity()
    try:
        cart = _cart().update_item(session_id=session_id, user_id=user_id, payload=payload, lang=current_lang())
    except ValueError as exc:
        return send_json({"error": str(exc)})
    return send_json(cart)


@cart_bp.delete("/remove-frame-from-cart/<order_line_id>")
def remove_frame_from_cart(order_line_id: str):
    session_id, user_id = current_identity()
    try:
        result = _cart().remove_item(session_id=session_id, user_id=user_id, order_line_id=order_line_id)
    except ValueError as exc:
        return send_json({"error": str(exc)})
    return send_json(result)


@cart_bp.delete("/frame-cart")
def clear_frame_cart():
    session_id, user_id = current_identity()
    try:
        result = _cart().clear_cart(session_id=session_id, user_id=user_id)
    except ValueError as exc:
        return send_json({"error": str(exc)})
    return send_json(result)
