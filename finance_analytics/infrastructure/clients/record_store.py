"""Record store HTTP client for fetching transactions, budgets and goals"""

import httpx
from datetime import date
from typing import Any, Dict, List, Optional
from finance_analytics.domain.models import (
    Budget,
    BudgetPeriod,
    Category,
    CategoryAllocation,
    Contribution,
    Goal,
    GoalStatus,
    Record,
    TransactionType,
)
from finance_analytics.domain.exceptions import RecordNotFoundError, RecordStoreError
from finance_analytics.config import settings


def parse_record(data: Dict[str, Any]) -> Record:
    return Record(
        transaction_id=str(data["transaction_id"]),
        amount=float(data["amount"]),
        type=TransactionType(data["type"]),
        date=date.fromisoformat(data["date"]),
        category_id=str(data["category_id"]),
        description=data.get("description", ""),
        payee=data.get("payee"),
        account_id=data.get("account_id"),
    )


def parse_category(data: Dict[str, Any]) -> Category:
    return Category(
        category_id=str(data["category_id"]),
        name=data["name"],
        type=TransactionType(data.get("type", "expense")),
    )


def parse_budget(data: Dict[str, Any]) -> Budget:
    return Budget(
        budget_id=str(data["budget_id"]),
        name=data["name"],
        total_amount=float(data["total_amount"]),
        period=BudgetPeriod(data["period"]),
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        category_allocations=tuple(
            CategoryAllocation(
                category_id=str(a["category_id"]),
                allocated_amount=float(a["allocated_amount"]),
                spent_amount=float(a.get("spent_amount", 0)),
                category_name=a.get("category_name"),
            )
            for a in data.get("category_allocations", [])
        ),
        alert_threshold=float(data.get("alert_threshold", 80)),
    )


def parse_goal(data: Dict[str, Any]) -> Goal:
    return Goal(
        goal_id=str(data["goal_id"]),
        name=data["name"],
        target_amount=float(data["target_amount"]),
        current_amount=float(data.get("current_amount", 0)),
        start_date=date.fromisoformat(data["start_date"]),
        target_date=date.fromisoformat(data["target_date"]),
        contributions=tuple(
            Contribution(amount=float(c["amount"]), date=date.fromisoformat(c["date"]))
            for c in data.get("contributions", [])
        ),
        milestone_percentages=tuple(float(p) for p in data.get("milestone_percentages") or ()),
        status=GoalStatus(data.get("status", "active")),
    )


class RecordStoreClient:
    """Client for the external record store API"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.record_store_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET a record store resource and return its JSON body.

        Raises:
            RecordNotFoundError: on 404
            RecordStoreError: on timeout, other HTTP errors, or network failure
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}{path}",
                    params={k: v for k, v in params.items() if v is not None},
                )
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise RecordStoreError(f"Record store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    raise RecordNotFoundError(f"Not found: {path}") from e
                raise RecordStoreError(f"Record store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise RecordStoreError(f"Record store unreachable: {e}") from e
            except ValueError as e:
                raise RecordStoreError(f"Invalid JSON from record store: {e}") from e

    async def get_transactions(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category_id: Optional[str] = None,
        type: Optional[TransactionType] = None,
    ) -> List[Record]:
        """
        Fetch a user's transactions, optionally filtered by date range,
        category and type.

        Raises:
            RecordStoreError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get(
            "/records/transactions",
            {
                "user_id": user_id,
                "start": start.isoformat() if start else None,
                "end": end.isoformat() if end else None,
                "category_id": category_id,
                "type": type.value if type else None,
            },
        )
        try:
            return [parse_record(txn) for txn in data.get("transactions", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise RecordStoreError(f"Invalid transaction data from record store: {e}") from e

    async def get_budget(self, user_id: str, budget_id: str) -> Budget:
        data = await self._get(f"/records/budgets/{budget_id}", {"user_id": user_id})
        try:
            return parse_budget(data)
        except (KeyError, ValueError, TypeError) as e:
            raise RecordStoreError(f"Invalid budget data from record store: {e}") from e

    async def get_budgets(self, user_id: str) -> List[Budget]:
        data = await self._get("/records/budgets", {"user_id": user_id})
        try:
            return [parse_budget(b) for b in data.get("budgets", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise RecordStoreError(f"Invalid budget data from record store: {e}") from e

    async def get_goal(self, user_id: str, goal_id: str) -> Goal:
        data = await self._get(f"/records/goals/{goal_id}", {"user_id": user_id})
        try:
            return parse_goal(data)
        except (KeyError, ValueError, TypeError) as e:
            raise RecordStoreError(f"Invalid goal data from record store: {e}") from e

    async def get_goals(self, user_id: str) -> List[Goal]:
        data = await self._get("/records/goals", {"user_id": user_id})
        try:
            return [parse_goal(g) for g in data.get("goals", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise RecordStoreError(f"Invalid goal data from record store: {e}") from e

    async def get_categories(self, user_id: str) -> List[Category]:
        """Category labels for a user's transactions"""
        data = await self._get("/records/categories", {"user_id": user_id})
        try:
            return [parse_category(c) for c in data.get("categories", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise RecordStoreError(f"Invalid category data from record store: {e}") from e
