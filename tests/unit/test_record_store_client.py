"""Unit tests for the record store client"""

import httpx
import pytest
from datetime import date
from unittest.mock import AsyncMock, patch
from finance_analytics.domain.exceptions import RecordNotFoundError, RecordStoreError
from finance_analytics.domain.models import BudgetPeriod, TransactionType
from finance_analytics.infrastructure.clients.record_store import RecordStoreClient, parse_goal

BASE_URL = "http://record-store.test"


def _response(status_code: int, json=None) -> httpx.Response:
    return httpx.Response(status_code, json=json, request=httpx.Request("GET", BASE_URL))


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_get_transactions_parses_records(mock_get: AsyncMock):
    """Test transactions are parsed and empty filters are not sent"""
    mock_get.return_value = _response(
        200,
        {
            "transactions": [
                {
                    "transaction_id": "tx_1",
                    "amount": 42.5,
                    "type": "expense",
                    "date": "2024-03-01",
                    "category_id": "dining",
                    "payee": "Cafe",
                }
            ]
        },
    )

    records = await RecordStoreClient(base_url=BASE_URL).get_transactions(
        "user_1", start=date(2024, 3, 1), type=TransactionType.EXPENSE
    )

    assert records[0].amount == 42.5
    assert records[0].type == TransactionType.EXPENSE
    assert records[0].account_id is None
    params = mock_get.call_args.kwargs["params"]
    assert params == {"user_id": "user_1", "start": "2024-03-01", "type": "expense"}


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_get_budget_parses_allocations(mock_get: AsyncMock):
    mock_get.return_value = _response(
        200,
        {
            "budget_id": "b1",
            "name": "March",
            "total_amount": 500,
            "period": "monthly",
            "start_date": "2024-03-01",
            "end_date": "2024-04-01",
            "category_allocations": [{"category_id": "dining", "allocated_amount": 200, "spent_amount": 50}],
        },
    )

    budget = await RecordStoreClient(base_url=BASE_URL).get_budget("user_1", "b1")

    assert budget.period == BudgetPeriod.MONTHLY
    assert budget.alert_threshold == 80.0
    assert budget.total_spent == 50.0


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_not_found_maps_to_record_not_found(mock_get: AsyncMock):
    mock_get.return_value = _response(404, {"detail": "missing"})

    with pytest.raises(RecordNotFoundError):
        await RecordStoreClient(base_url=BASE_URL).get_goal("user_1", "missing")


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_server_error_maps_to_record_store_error(mock_get: AsyncMock):
    mock_get.return_value = _response(500)

    with pytest.raises(RecordStoreError):
        await RecordStoreClient(base_url=BASE_URL).get_budgets("user_1")


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_timeout_maps_to_record_store_error(mock_get: AsyncMock):
    mock_get.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(RecordStoreError):
        await RecordStoreClient(base_url=BASE_URL, timeout=0.1).get_transactions("user_1")


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_malformed_record_maps_to_record_store_error(mock_get: AsyncMock):
    """Test a record missing required fields is reported as a record store failure"""
    mock_get.return_value = _response(200, {"goals": [{"goal_id": "g1"}]})

    with pytest.raises(RecordStoreError):
        await RecordStoreClient(base_url=BASE_URL).get_goals("user_1")


def test_parse_goal_defaults():
    goal = parse_goal(
        {
            "goal_id": 7,
            "name": "Car",
            "target_amount": "5000",
            "start_date": "2024-01-01",
            "target_date": "2025-01-01",
        }
    )

    assert goal.goal_id == "7"
    assert goal.current_amount == 0.0
    assert goal.milestone_percentages == ()


@patch("httpx.AsyncClient.get", new_callable=AsyncMock)
async def test_get_categories(mock_get: AsyncMock):
    mock_get.return_value = _response(
        200,
        {"categories": [{"category_id": "dining", "name": "Dining"}, {"category_id": "pay", "name": "Pay", "type": "income"}]},
    )

    categories = await RecordStoreClient(base_url=BASE_URL).get_categories("user_1")

    assert [c.name for c in categories] == ["Dining", "Pay"]
    assert categories[0].type == TransactionType.EXPENSE
    assert categories[1].type == TransactionType.INCOME
