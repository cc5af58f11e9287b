"""Category merge and budget reconciliation.

Everything in this module is pure: it works on plain mappings and returns new
values, never touching the session. ``budget_service`` loads the inputs and
persists the results.

Allocations are kept as an ordered ``dict`` keyed by category, so a budget can
never hold two entries for the same category and insertion order is the
display order of the budget.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Tuple

from backend.app.exceptions import BudgetNotFoundError, DuplicateCategoryError
from backend.app.models.models import ExpenseCategory

ZERO = Decimal("0")

Allocations = Dict[ExpenseCategory, Decimal]


@dataclass(frozen=True)
class CategoryAllocation:
    category: ExpenseCategory
    allocated: Decimal
    spent: Decimal
    remaining: Decimal


@dataclass(frozen=True)
class ReconciliationResult:
    lines: Tuple[CategoryAllocation, ...]
    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal


# --- Category merge ---

def merge_replacement(items: Iterable[Tuple[ExpenseCategory, Decimal]]) -> Allocations:
    """Build a fresh allocation map from a full category list."""
    merged: Allocations = {}
    for category, allocated in items:
        if category in merged:
            raise DuplicateCategoryError(
                f"Category '{category.value}' appears more than once in this budget"
            )
        merged[category] = Decimal(allocated)
    return merged


def merge_upsert(current: Mapping[ExpenseCategory, Decimal], category: ExpenseCategory,
                 allocated: Decimal) -> Allocations:
    """Set one category's allocation, keeping its position if it already exists."""
    merged = dict(current)
    merged[category] = Decimal(allocated)
    return merged


def merge_addition(current: Mapping[ExpenseCategory, Decimal], category: ExpenseCategory,
                   allocated: Decimal) -> Allocations:
    if category in current:
        raise DuplicateCategoryError(f"Category '{category.value}' already exists in this budget")
    return merge_upsert(current, category, allocated)


def merge_removal(current: Mapping[ExpenseCategory, Decimal], category: ExpenseCategory) -> Allocations:
    if category not in current:
        raise BudgetNotFoundError(f"Category '{category.value}' not found in this budget")
    return {c: amount for c, amount in current.items() if c != category}


# --- Reconciliation ---

def aggregate_spending(postings: Iterable[Tuple[ExpenseCategory, Decimal]]) -> Dict[ExpenseCategory, Decimal]:
    """Sum posting amounts per category with exact decimal addition."""
    spent: Dict[ExpenseCategory, Decimal] = {}
    for category, amount in postings:
        spent[category] = spent.get(category, ZERO) + Decimal(amount)
    return spent


def reconcile(allocations: Mapping[ExpenseCategory, Decimal],
              spent_by_category: Mapping[ExpenseCategory, Decimal]) -> ReconciliationResult:
    """Derive every balance of a budget from its allocations and the ledger.

    Nothing is read from a previous result, so running this twice on the same
    inputs gives the same output. Remaining amounts are allowed to go negative.
    """
    lines = []
    total_budget = ZERO
    total_spent = ZERO
    total_remaining = ZERO
    for category, allocated in allocations.items():
        spent = spent_by_category.get(category, ZERO)
        remaining = allocated - spent
        lines.append(CategoryAllocation(category, allocated, spent, remaining))
        total_budget += allocated
        total_spent += spent
        total_remaining += remaining

    return ReconciliationResult(
        lines=tuple(lines),
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_remaining,
    )
