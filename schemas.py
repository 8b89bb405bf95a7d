"""
Request and response schemas shared by the server and the client.

The summary is serialized with camelCase keys (``totalIncome``,
``totalExpenses``); Python code uses the snake_case attribute names.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TransactionType = Literal["income", "expense"]

# Suggested categories offered by the form; the store accepts any string.
CATEGORIES = {
    "salary": "Salary",
    "freelance": "Freelance",
    "investments": "Investments",
    "gifts": "Gifts",
    "groceries": "Groceries",
    "dining": "Dining Out",
    "transportation": "Transportation",
    "entertainment": "Entertainment",
    "utilities": "Utilities",
    "shopping": "Shopping",
    "health": "Health",
    "other": "Other",
}


class TransactionIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(..., min_length=1, description="What the money was for")
    amount: float = Field(..., gt=0, description="Positive amount; direction comes from type")
    type: TransactionType = Field(..., description="Income or expense")
    category: str = Field(..., min_length=1, description="Category such as salary, groceries, rent")
    date: Optional[str] = Field(None, description="ISO date or datetime; defaults to now")


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    amount: float
    type: TransactionType
    category: str
    date: str


class Summary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_income: float = Field(0.0, alias="totalIncome")
    total_expenses: float = Field(0.0, alias="totalExpenses")
    balance: float = 0.0


class DeleteResult(BaseModel):
    deleted: int


class ErrorResponse(BaseModel):
    error: str
