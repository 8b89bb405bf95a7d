"""HTTP client for the finance API, used by the Streamlit front end."""

import logging
from typing import List, Optional

import requests

from config import API_URL
from schemas import DeleteResult, Summary, TransactionIn, TransactionOut

logger = logging.getLogger(__name__)


class FinanceAPI:
    """Thin wrapper over the REST endpoints.

    Every method raises ``requests.HTTPError`` for a non-2xx response and
    ``pydantic.ValidationError`` if the server sends an unexpected body.
    """

    def __init__(self, base_url: str = API_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get_transactions(self) -> List[TransactionOut]:
        resp = self.session.get(self._url("/transactions"))
        resp.raise_for_status()
        return [TransactionOut.model_validate(row) for row in resp.json()]

    def get_summary(self) -> Summary:
        resp = self.session.get(self._url("/summary"))
        resp.raise_for_status()
        return Summary.model_validate(resp.json())

    def add_transaction(self, payload: TransactionIn) -> TransactionOut:
        resp = self.session.post(self._url("/transactions"), json=payload.model_dump(exclude_none=True))
        resp.raise_for_status()
        return TransactionOut.model_validate(resp.json())

    def update_transaction(self, txn_id: int, payload: TransactionIn) -> TransactionOut:
        resp = self.session.put(
            self._url(f"/transactions/{txn_id}"), json=payload.model_dump(exclude_none=True)
        )
        resp.raise_for_status()
        return TransactionOut.model_validate(resp.json())

    def delete_transaction(self, txn_id: int) -> int:
        resp = self.session.delete(self._url(f"/transactions/{txn_id}"))
        resp.raise_for_status()
        return DeleteResult.model_validate(resp.json()).deleted

    def close(self):
        self.session.close()
