from typing import Any, Dict, Iterable, List, Optional


class AccessFilter:
    """Post-processing of row lists before they leave the api.

    Rows carrying an owner column are only visible to that owner (or an
    admin); in the users table a row is owned by the user it describes.
    Password columns are never returned.
    """

    def __init__(
        self,
        *,
        owner_field: str = "userId",
        user_table: str = "users",
        password_fields: Iterable[str] = ("password",),
        admin_roles: Iterable[str] = ("admin",),
    ) -> None:
        self._owner_field = owner_field
        self._user_table = user_table.lower()
        self._password_fields = tuple(password_fields)
        self._admin_roles = set(admin_roles)

    def filter_rows(
        self,
        rows: List[Dict[str, Any]],
        user: Optional[Dict[str, Any]],
        table: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        user = user or {}
        is_admin = user.get("role") in self._admin_roles
        user_id = user.get("id")
        owner_field = "id" if (table or "").lower() == self._user_table else self._owner_field
        visible = []
        for row in rows:
            owner = row.get(owner_field)
            if not is_admin and owner is not None and owner != user_id:
                continue
            for name in self._password_fields:
                row.pop(name, None)
            visible.append(row)
        return visible
