import logging
from typing import Any, Dict, Iterable

import requests


logger = logging.getLogger(__name__)


class ExchangeRateService:
    """USD based exchange rates, narrowed down to the shop's currencies."""

    def __init__(self, url: str, currencies: Iterable[str] = ("nok", "sek"), timeout: float = 10.0) -> None:
        self._url = url
        self._currencies = tuple(c.lower() for c in currencies)
        self._timeout = timeout

    def get_rates(self) -> Dict[str, Any]:
        try:
            resp = requests.get(self._url, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Exchange rate lookup failed: %s", exc)
            return {"error": f"Could not fetch exchange rates: {exc}"}
        usd = data.get("usd") if isinstance(data, dict) else None
        if not isinstance(usd, dict):
            return {"error": "Unexpected exchange rate format"}
        return {
            "date": data.get("date"),
            "usd": {k: v for k, v in usd.items() if k in self._currencies},
        }
