"""Resource services for the Sbanken API.

Each service turns an executed request into domain objects and raises
:class:`~sbanken_sdk.errors.ApiError` when the response envelope reports an
error.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, TypeVar
from urllib.parse import quote

from .errors import DecodeError
from .models import (
    Account,
    Customer,
    ErrorEnvelope,
    ItemResponse,
    ItemsResponse,
    Transaction,
    TransferRequest,
)
from .telemetry import trace_operation

if TYPE_CHECKING:
    from .config import SbankenConfig
    from .core.http_executor import RequestExecutor
    from .types import ApiResponse

EnvelopeT = TypeVar("EnvelopeT", bound=ErrorEnvelope)


def _unwrap(response: ApiResponse[EnvelopeT]) -> EnvelopeT:
    envelope = response.data
    if envelope is None:
        raise DecodeError("Response carried no envelope", status_code=response.status_code)
    envelope.raise_for_error(status_code=response.status_code)
    return envelope


class _Service:
    endpoint_field: str

    def __init__(self, executor: RequestExecutor, config: SbankenConfig) -> None:
        self._executor = executor
        self._config = config

    def _url(self, *segments: str) -> str:
        base = self._config.require_endpoint(self.endpoint_field)
        return "/".join([base, *(quote(segment, safe="") for segment in segments)])


class CustomersService(_Service):
    endpoint_field = "customers_endpoint"

    def get(self) -> Customer:
        """Get the customer the client acts for."""
        with trace_operation("customers.get"):
            response = self._executor.get(self._url(), into=ItemResponse[Customer])
        envelope = _unwrap(response)
        if envelope.item is None:
            raise DecodeError("Customer response had no item", status_code=response.status_code)
        return envelope.item


class AccountsService(_Service):
    endpoint_field = "accounts_endpoint"

    def list(self) -> list[Account]:
        """List the customer's accounts."""
        with trace_operation("accounts.list"):
            response = self._executor.get(self._url(), into=ItemsResponse[Account])
        return _unwrap(response).items

    def get(self, account_id: str) -> Account:
        """Get a single account."""
        with trace_operation("accounts.get", attributes={"account_id": account_id}):
            response = self._executor.get(self._url(account_id), into=ItemResponse[Account])
        envelope = _unwrap(response)
        if envelope.item is None:
            raise DecodeError("Account response had no item", status_code=response.status_code)
        return envelope.item


class TransactionsService(_Service):
    endpoint_field = "transactions_endpoint"

    def list(
        self,
        account_id: str,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        index: int | None = None,
        length: int | None = None,
    ) -> list[Transaction]:
        """List transactions on an account.

        ``index`` and ``length`` select a window of the result and are sent
        as given; further windows are the caller's business.
        """
        params: dict[str, str] = {}
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        if index is not None:
            params["index"] = str(index)
        if length is not None:
            params["length"] = str(length)

        with trace_operation("transactions.list", attributes={"account_id": account_id}):
            response = self._executor.get(
                self._url(account_id), params, into=ItemsResponse[Transaction]
            )
        return _unwrap(response).items


class TransfersService(_Service):
    endpoint_field = "transfers_endpoint"

    def create(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: float,
        message: str | None = None,
    ) -> None:
        """Transfer money between two of the customer's accounts."""
        transfer = TransferRequest(
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            message=message,
        )
        with trace_operation("transfers.create"):
            response = self._executor.post(self._url(), body=transfer, into=ErrorEnvelope)
        _unwrap(response)
