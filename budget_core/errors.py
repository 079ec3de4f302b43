class BudgetAppError(Exception):
    """Base class for errors raised at the store and service boundary."""

    def __init__(self, message: str, code: str = "BUDGET_APP_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class StoreError(BudgetAppError):
    """The persistence store could not read or write its records."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STORE_ERROR")


class BudgetNotFoundError(BudgetAppError):
    def __init__(self, budget_id: str) -> None:
        super().__init__(f"Budget '{budget_id}' does not exist.", code="BUDGET_NOT_FOUND")
        self.budget_id = budget_id
