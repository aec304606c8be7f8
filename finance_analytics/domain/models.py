"""Domain models - immutable dataclasses for finance records and analytics results"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


# --- Input records (owned by the record store) ---


@dataclass(frozen=True)
class Record:
    """Transaction from the record store"""

    transaction_id: str
    amount: float
    type: TransactionType
    date: date
    category_id: str
    description: str = ""
    payee: Optional[str] = None
    account_id: Optional[str] = None


@dataclass(frozen=True)
class CategoryAllocation:
    """Share of a budget assigned to one category"""

    category_id: str
    allocated_amount: float
    spent_amount: float
    category_name: Optional[str] = None


@dataclass(frozen=True)
class Budget:
    """Spending budget over a fixed period"""

    budget_id: str
    name: str
    total_amount: float
    period: BudgetPeriod
    start_date: date
    end_date: date
    category_allocations: Tuple[CategoryAllocation, ...] = ()
    alert_threshold: float = 80.0  # percent of budget that triggers a warning

    @property
    def total_spent(self) -> float:
        return sum(a.spent_amount for a in self.category_allocations)


@dataclass(frozen=True)
class Contribution:
    """Single deposit toward a goal"""

    amount: float
    date: date


@dataclass(frozen=True)
class Goal:
    """Savings goal with contribution history"""

    goal_id: str
    name: str
    target_amount: float
    current_amount: float
    start_date: date
    target_date: date
    contributions: Tuple[Contribution, ...] = ()
    milestone_percentages: Tuple[float, ...] = ()
    status: GoalStatus = GoalStatus.ACTIVE


@dataclass(frozen=True)
class Category:
    """Category lookup entry, used only for labels"""

    category_id: str
    name: str
    type: TransactionType


# --- Time buckets and projections ---


@dataclass(frozen=True)
class Bucket:
    """Aggregated records sharing a truncated date key"""

    period_key: str
    period_start: date
    total: float
    count: int
    average: float


@dataclass(frozen=True)
class BucketSeries:
    """Buckets ordered by period, ascending, unique keys"""

    granularity: Granularity
    buckets: Tuple[Bucket, ...] = ()

    @property
    def total(self) -> float:
        return sum(b.total for b in self.buckets)

    @property
    def totals(self) -> Tuple[float, ...]:
        return tuple(b.total for b in self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)


@dataclass(frozen=True)
class PeriodComparison:
    previous_total: float
    current_total: float
    delta: float
    percent_change: Optional[float]  # None when the previous total is zero
    direction: str  # increasing | decreasing | stable


@dataclass(frozen=True)
class ProjectionPoint:
    step: int
    period: str
    value: float
    confidence: float


@dataclass(frozen=True)
class ProjectionSeries:
    """Forward projection; can_project=False carries the reason instead of points"""

    can_project: bool
    reason: Optional[str] = None
    slope: Optional[float] = None
    intercept: Optional[float] = None
    points: Tuple[ProjectionPoint, ...] = ()


@dataclass(frozen=True)
class SeasonalGroup:
    sub_period: int
    mean: float
    count: int


@dataclass(frozen=True)
class PatternAnalysis:
    trend: str  # improving | declining | stable | insufficient-data
    patterns: Tuple[str, ...] = ()
    seasonal_groups: Tuple[SeasonalGroup, ...] = ()


# --- Budget performance ---


@dataclass(frozen=True)
class CategoryUtilization:
    category_id: str
    category_name: Optional[str]
    allocated_amount: float
    spent_amount: float
    utilization_percentage: float
    status: str  # over-budget | warning | on-track


@dataclass(frozen=True)
class HealthFactor:
    factor: str
    impact: float
    description: str


@dataclass(frozen=True)
class HealthScore:
    score: float
    health_level: str
    factors: Tuple[HealthFactor, ...] = ()


@dataclass(frozen=True)
class Violation:
    type: str
    level: str  # critical | warning
    message: str
    percentage: float
    amount: Optional[float] = None
    category_id: Optional[str] = None


@dataclass(frozen=True)
class BudgetProjection:
    can_project: bool
    reason: Optional[str] = None
    days_elapsed: int = 0
    days_remaining: int = 0
    total_days: int = 0
    spent_to_date: float = 0.0
    daily_spending_rate: float = 0.0
    projected_total_spending: float = 0.0
    projected_variance: float = 0.0
    projected_utilization: float = 0.0
    status: Optional[str] = None


@dataclass(frozen=True)
class Recommendation:
    type: str  # warning | action | opportunity
    category: str
    priority: str  # high | medium | low
    title: str
    description: str
    category_id: Optional[str] = None


@dataclass(frozen=True)
class PerformanceReport:
    """Budget performance as of a given date"""

    budget_id: str
    as_of: date
    total_amount: float
    total_spent: float
    total_remaining: float
    total_days: int
    days_elapsed: int
    days_remaining: int
    time_progress: float
    burn_rate: float
    burn_rate_variance: float
    is_on_track: bool
    daily_spending_rate: float
    projected_end_spending: float
    projected_overrun: float
    category_utilization: Tuple[CategoryUtilization, ...]
    health: HealthScore
    violations: Tuple[Violation, ...]
    projection: BudgetProjection
    recommendations: Tuple[Recommendation, ...] = ()


# --- Goal progress ---


@dataclass(frozen=True)
class ProgressMetrics:
    total_days: int
    days_elapsed: int
    days_remaining: int
    amount_remaining: float
    progress_percentage: float
    timeline_progress: float
    months_remaining: float
    required_monthly_contribution: float
    average_monthly_contribution: float
    is_achievable: bool
    is_behind_schedule: bool
    schedule_status: str  # ahead | on-track | behind


@dataclass(frozen=True)
class Milestone:
    percentage: float
    amount: float
    achieved: bool
    achieved_date: Optional[date] = None


@dataclass(frozen=True)
class CompletionForecast:
    likelihood: str  # high | moderate | low | unknown
    estimated_completion_date: Optional[date] = None
    on_target: Optional[bool] = None


# --- Income ---


@dataclass(frozen=True)
class IncomeSource:
    source: str
    amounts: Tuple[float, ...]
    dates: Tuple[date, ...] = ()

    @property
    def total(self) -> float:
        return sum(self.amounts)


@dataclass(frozen=True)
class DiversificationScore:
    score: float
    hhi: float
    source_count: int
    shares: Tuple[Tuple[str, float], ...] = ()


@dataclass(frozen=True)
class RecurringSource:
    source: str
    estimated_amount: float
    frequency: int
    coefficient_of_variation: float
    reliability: float


@dataclass(frozen=True)
class IncomeReport:
    total_income: float
    source_count: int
    sources: Tuple[Tuple[str, float], ...]
    diversification: DiversificationScore
    recurring_income: Tuple[RecurringSource, ...]
    growth: PeriodComparison


# --- Spending ---


@dataclass(frozen=True)
class CategorySpending:
    category_id: str
    category_name: Optional[str]
    total_amount: float
    transaction_count: int
    average_amount: float
    min_amount: float
    max_amount: float


@dataclass(frozen=True)
class PayeeSpending:
    payee: str
    total_amount: float
    transaction_count: int


@dataclass(frozen=True)
class SpendingSummary:
    """Expense totals for a window, broken down by category and payee"""

    total_spending: float
    average_daily_spending: float
    transaction_count: int
    categories_count: int
    categories: Tuple[CategorySpending, ...] = ()
    top_payees: Tuple[PayeeSpending, ...] = ()


# --- Net worth ---


@dataclass(frozen=True)
class NetWorthSnapshot:
    date: date
    net_worth: float
    assets: float
    liabilities: float


@dataclass(frozen=True)
class NetWorthTrend:
    trend: str  # increasing | decreasing | stable | insufficient-data
    monthly_change: float = 0.0
    monthly_percentage_change: float = 0.0
    overall_change: float = 0.0
    overall_percentage_change: float = 0.0
    volatility: float = 0.0


@dataclass(frozen=True)
class NetWorthReport:
    as_of: date
    current: NetWorthSnapshot
    history: Tuple[NetWorthSnapshot, ...]
    trend: NetWorthTrend
    projection: Optional[ProjectionSeries] = None


# --- Cash flow ---


@dataclass(frozen=True)
class CashFlowMonth:
    period_key: str
    income: float
    expenses: float
    net_flow: float
    savings_rate: float
    running_balance: float = 0.0


@dataclass(frozen=True)
class SavingsRateSummary:
    average: float
    best: Optional[CashFlowMonth] = None
    worst: Optional[CashFlowMonth] = None


@dataclass(frozen=True)
class CashFlowReport:
    months: Tuple[CashFlowMonth, ...]
    savings_rate: SavingsRateSummary
    patterns: PatternAnalysis
    projection: ProjectionSeries
