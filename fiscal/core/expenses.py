from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from .money import D, to_rounded


class ExpenseCategory(str, Enum):
    RENT = "rent"
    UTILITIES = "utilities"
    MEALS = "meals"
    TRAINING = "training"
    SOFTWARE = "software"
    EQUIPMENT = "equipment"
    OTHER = "other"


class ExpenseRisk(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[ExpenseCategory, tuple[str, ...]], ...] = (
    (ExpenseCategory.RENT, ("alquiler", "arrendamiento", "renta")),
    (ExpenseCategory.UTILITIES, ("electricidad", "luz", "endesa", "iberdrola")),
    (ExpenseCategory.UTILITIES, ("internet", "telefon", "fibra", "movistar", "vodafone")),
    (ExpenseCategory.MEALS, ("comida", "restaurante")),
    (ExpenseCategory.TRAINING, ("formaci", "curso")),
    (ExpenseCategory.SOFTWARE, ("software", "licencia")),
    (ExpenseCategory.EQUIPMENT, ("ordenador", "laptop")),
)

_RENT_KEYWORDS = ("alquiler", "arrendamiento")
_ESSENTIAL_UTILITY_KEYWORDS = ("electricidad", "luz", "internet", "agua")

MEAL_WEEKDAY_LIMIT = D("50")
LARGE_EXPENSE_LIMIT = D("1000")


def detect_category(concept: str) -> ExpenseCategory:
    text = (concept or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return ExpenseCategory.OTHER


def is_independence_expense(category: str, concept: str) -> bool:
    """Rent and essential utilities are the expenses that evidence independence."""
    category_text = str(category.value if isinstance(category, Enum) else category or "").lower()
    text = (concept or "").lower()
    if category_text in ("rent", "alquiler") or any(k in text for k in _RENT_KEYWORDS):
        return True
    is_utility = category_text in ("utilities", "suministros") or "suministro" in category_text
    return is_utility and any(k in text for k in _ESSENTIAL_UTILITY_KEYWORDS)


def expense_risk_level(category: Any, spent_on: date, amount: Any) -> ExpenseRisk:
    category = ExpenseCategory(category) if not isinstance(category, ExpenseCategory) else category
    value = to_rounded(amount, field="amount")
    if category is ExpenseCategory.MEALS:
        if spent_on.weekday() >= 5:
            return ExpenseRisk.HIGH
        if value > MEAL_WEEKDAY_LIMIT:
            return ExpenseRisk.MEDIUM
    if value > LARGE_EXPENSE_LIMIT and category is not ExpenseCategory.RENT:
        return ExpenseRisk.MEDIUM
    return ExpenseRisk.LOW


__all__ = [
    "ExpenseCategory",
    "ExpenseRisk",
    "CATEGORY_KEYWORDS",
    "detect_category",
    "is_independence_expense",
    "expense_risk_level",
]
