from uuid import uuid4
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column, String, Integer, DateTime, Date, Numeric, ForeignKey, Enum as PgEnum, UniqueConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Money columns: 15 integer digits, 4 decimals
Money = Numeric(19, 4)

# --- ENUMS ---

class ExpenseCategory(str, Enum):
    # Fixed living expenses
    RENT = "rent"
    MORTGAGE = "mortgage"
    UTILITIES = "utilities"
    INTERNET_PHONE = "internet_phone"
    HOME_INSURANCE = "home_insurance"
    PROPERTY_TAX = "property_tax"
    HOME_MAINTENANCE = "home_maintenance"

    # Food & dining
    GROCERIES = "groceries"
    RESTAURANTS = "restaurants"
    COFFEE_SNACKS = "coffee_snacks"
    FOOD_DELIVERY = "food_delivery"

    # Transportation
    FUEL = "fuel"
    CAR_PAYMENT = "car_payment"
    CAR_INSURANCE = "car_insurance"
    CAR_REPAIRS = "car_repairs"
    PARKING_TOLLS = "parking_tolls"
    PUBLIC_TRANSPORT = "public_transport"

    # Personal & health
    HEALTH_INSURANCE = "health_insurance"
    MEDICAL = "medical"
    PHARMACY = "pharmacy"
    FITNESS = "fitness"
    PERSONAL_CARE = "personal_care"

    # Shopping & essentials
    CLOTHING = "clothing"
    ELECTRONICS = "electronics"
    HOME_SUPPLIES = "home_supplies"
    BEAUTY_COSMETICS = "beauty_cosmetics"

    # Family & childcare
    CHILDCARE = "childcare"
    EDUCATION_CHILD = "education_child"
    TOYS_GAMES = "toys_games"
    PET_EXPENSES = "pet_expenses"

    # Education & self-development
    TUITION = "tuition"
    ONLINE_COURSES = "online_courses"
    BOOKS = "books"
    WORKSHOPS = "workshops"

    # Entertainment & leisure
    STREAMING = "streaming"
    MOVIES_EVENTS = "movies_events"
    TRAVEL = "travel"
    HOBBIES = "hobbies"

    # Debt & savings
    LOAN_PAYMENT = "loan_payment"
    CREDIT_CARD_PAYMENT = "credit_card_payment"
    SAVINGS_CONTRIBUTION = "savings_contribution"
    INVESTMENT_CONTRIBUTION = "investment_contribution"

    # Business & professional
    WORK_TOOLS = "work_tools"
    PROFESSIONAL_SERVICES = "professional_services"
    PROFESSIONAL_SUBSCRIPTIONS = "professional_subscriptions"
    OFFICE_RENT = "office_rent"

    # Giving & donations
    CHARITY = "charity"
    GIFTS = "gifts"
    RELIGIOUS_OFFERING = "religious_offering"

    # Emergency & unplanned
    EMERGENCY_EXPENSE = "emergency_expense"
    ACCIDENT = "accident"
    UNPLANNED_TRAVEL = "unplanned_travel"
    MEDICAL_EMERGENCY = "medical_emergency"

    # Fees & charges
    BANK_FEES = "bank_fees"
    LATE_FEES = "late_fees"
    SERVICE_CHARGES = "service_charges"
    FOREIGN_FEES = "foreign_fees"

    @classmethod
    def _missing_(cls, value):
        # Accept "RENT" as well as "rent"
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None

# --- SQLALCHEMY MODELS ---

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    email = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    budgets = relationship("Budget", back_populates="user")
    expenses = relationship("Expense", back_populates="user")

class Expense(Base):
    """A single ledger posting. Budgets only ever read these."""
    __tablename__ = "expenses"
    __table_args__ = (
        Index("idx_expense_user_date", "user_id", "expense_date"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    category = Column(PgEnum(ExpenseCategory), nullable=False)
    amount = Column(Money, nullable=False)
    expense_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="expenses")

class Budget(Base):
    """Monthly budget of one user, kept in step with the expense ledger."""
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", name="uk_budget_user_period"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    total_budget = Column(Money, nullable=False, default=0)
    total_spent = Column(Money, nullable=False, default=0)
    total_remaining = Column(Money, nullable=False, default=0)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="budgets")
    categories = relationship(
        "BudgetCategory",
        back_populates="budget",
        order_by="BudgetCategory.position",
        cascade="all, delete-orphan",
    )

    # Optimistic locking: a stale read-modify-write fails at flush time
    __mapper_args__ = {"version_id_col": version}

class BudgetCategory(Base):
    __tablename__ = "budget_categories"
    __table_args__ = (
        UniqueConstraint("budget_id", "category", name="uk_budgetcat_budget_category"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    budget_id = Column(String, ForeignKey("budgets.id"), nullable=False)
    position = Column(Integer, nullable=False)
    category = Column(PgEnum(ExpenseCategory), nullable=False)
    allocated = Column(Money, nullable=False)
    spent_amount = Column(Money, nullable=False, default=0)
    remaining = Column(Money, nullable=False)

    # Relationships
    budget = relationship("Budget", back_populates="categories")
