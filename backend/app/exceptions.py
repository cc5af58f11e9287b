"""Domain errors raised by the budget and expense services.

Each error carries the HTTP status the API layer answers with; the handler in
``backend.app.main`` turns them into ``{"detail": ...}`` responses.
"""


class BudgetError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class DuplicateCategoryError(BudgetError):
    """The same category was supplied twice for one budget."""
    status_code = 400


class BudgetNotFoundError(BudgetError):
    status_code = 404


class BudgetOperationError(BudgetError):
    """A reconciliation could not complete; nothing was committed."""
    status_code = 500


class UserNotFoundError(BudgetOperationError):
    status_code = 404


class ExpenseNotFoundError(BudgetError):
    status_code = 404
