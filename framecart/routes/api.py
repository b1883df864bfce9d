"""Generic REST routes: one route set per table of the schema."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

from flask import Blueprint, Response, current_app, jsonify, request, session

from ..middleware import LANG_ENVIRON_KEY


api_bp = Blueprint("framecart_api", __name__, url_prefix="/api")


def _components() -> Dict[str, Any]:
    return current_app.extensions["framecart_components"]


def current_lang() -> str:
    return request.environ.get(LANG_ENVIRON_KEY, "en")


def current_user() -> Optional[Dict[str, Any]]:
    user = session.get("user")
    return user if isinstance(user, dict) else None


def current_identity() -> Tuple[str, Optional[Any]]:
    """Session id (created on first use) and the logged-in user's id."""
    sid = session.get("sid")
    if not sid:
        sid = uuid4().hex
        session["sid"] = sid
    user = current_user()
    return sid, (user or {}).get("id")


def read_json_body() -> Tuple[Dict[str, Any], Optional[str]]:
    if not request.get_data(cache=True):
        return {}, None
    body = request.get_json(silent=True, force=True)
    if body is None:
        return {}, "Malformed JSON in request body"
    if not isinstance(body, dict):
        return {}, "Request body must be a JSON object"
    return body, None


def send_json(data: Any, as_object: bool = False, table: Optional[str] = None) -> Tuple[Response, int]:
    """Filter row lists, then answer 400 for ``{error}`` payloads and 200 otherwise."""
    if isinstance(data, list):
        data = _components()["access_filter"].filter_rows(data, current_user(), table)
        if as_object:
            data = data[0] if data else None
    status = 400 if isinstance(data, dict) and "error" in data else 200
    return jsonify(data), status


@api_bp.post("/<table>")
def create_row(table: str):
    body, error = read_json_body()
    if error:
        return send_json({"error": error})
    result = _components()["resource_service"].create(table, body, route=request.path)
    return send_json(result)


@api_bp.get("/<table>")
def list_rows(table: str):
    result = _components()["resource_service"].list(table, request.args, current_lang(), route=request.path)
    return send_json(result, table=table)


@api_bp.get("/<table>/<row_id>")
def get_row(table: str, row_id: str):
    result = _components()["resource_service"].read_one(table, row_id, current_lang(), route=request.path)
    return send_json(result, as_object=True, table=table)


@api_bp.put("/<table>/<row_id>")
def update_row(table: str, row_id: str):
    body, error = read_json_body()
    if error:
        return send_json({"error": error})
    result = _components()["resource_service"].update(table, row_id, body, route=request.path)
    return send_json(result)


@api_bp.delete("/<table>/<row_id>")
def delete_row(table: str, row_id: str):
    result = _components()["resource_service"].delete(table, row_id, route=request.path)
    return send_json(result)


@api_bp.get("/exchange-rates")
def exchange_rates():
    return send_json(_components()["exchange_rates"].get_rates())
