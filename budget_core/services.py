import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from budget_core.domain import MONTHS, Budget, Identity
from budget_core.events import BALANCE_ALERT, BUDGET_DELETED, BUDGET_SAVED, EventBus, event_bus
from budget_core.functional import Either, Maybe, Nothing, Some
from budget_core.records import budget_from_record, budget_to_record
from budget_core.store import BudgetStore
from budget_core.totals import budget_totals, with_totals
from budget_core.validation import ValidationError, prepare_for_save, validate_budget

logger = logging.getLogger(__name__)

# Fields a collaborator's save must not overwrite
_OWNER_FIELDS = ("user_id", "created_at")


class BudgetService:
    """Facade threading one Budget through validation, totals and the store.

    The store is injected; events go to ``bus`` so the UI (or tests) can
    subscribe to saves and balance alerts.
    """

    def __init__(self, store: BudgetStore, bus: EventBus = event_bus, balance_threshold: int = 0):
        self.store = store
        self.bus = bus
        self.balance_threshold = balance_threshold

    def new_budget(
        self, identity: Identity, month: Optional[str] = None, year: Optional[int] = None,
        today: Optional[date] = None,
    ) -> Budget:
        today = today or date.today()
        return with_totals(Budget(
            id=str(uuid4()),
            name="",
            month=month or MONTHS[today.month - 1],
            year=year or today.year,
            members=(identity.display_name,),
            commitments=(),
            salaries={},
            created_at=datetime.now().isoformat(),
        ))

    def save(self, budget: Budget, identity: Identity) -> Either[tuple[ValidationError, ...], Budget]:
        """Validate, normalize and persist ``budget``.

        Returns Left with every validation error, or Right with the budget
        as stored. Store failures propagate as BudgetAppError.
        """
        result = validate_budget(budget).map(prepare_for_save)
        if result.is_left():
            logger.info("Budget %s rejected with %d validation error(s)", budget.id, len(result.get_error()))
            return result
        return result.map(lambda b: self._persist(b, identity))

    def _persist(self, budget: Budget, identity: Identity) -> Budget:
        record = budget_to_record(budget, identity.user_id)
        if self.store.get(budget.id) is None:
            stored = self.store.create(identity.user_id, record)
            logger.info("Created budget %s for user %s", budget.id, identity.user_id)
        else:
            updates = {k: v for k, v in record.items() if k not in _OWNER_FIELDS}
            stored = self.store.update(budget.id, updates)
            logger.info("Updated budget %s", budget.id)

        saved = replace(budget, created_at=stored.get("created_at") or budget.created_at)
        self.bus.publish(BUDGET_SAVED, {"budget_id": saved.id, "user_id": identity.user_id})
        self.alerts(saved)
        return saved

    def get(self, budget_id: str) -> Maybe[Budget]:
        record = self.store.get(budget_id)
        if record is None:
            return Nothing()
        return Some(budget_from_record(record))

    def list_for(self, identity: Identity) -> List[Budget]:
        records = self.store.list_for_user(identity.user_id, identity.email)
        return [budget_from_record(r) for r in records]

    def delete(self, budget_id: str) -> None:
        self.store.delete(budget_id)
        logger.info("Deleted budget %s", budget_id)
        self.bus.publish(BUDGET_DELETED, {"budget_id": budget_id})

    def alerts(self, budget: Budget) -> List[dict]:
        found = []
        for member, balance in budget_totals(budget).balance.items():
            results = self.bus.publish(BALANCE_ALERT, {
                "member": member,
                "balance": balance,
                "threshold": self.balance_threshold,
            })
            found.extend(r for r in results if r.get("alert"))
        return found

    def summary(self, budget: Budget) -> Dict[str, Any]:
        """Totals, alerts and validation messages for one budget."""
        totals = budget_totals(budget)
        validation = validate_budget(budget)
        return {
            "budget_id": budget.id,
            "month": budget.month,
            "year": budget.year,
            "totals": totals,
            "alerts": self.alerts(budget),
            "validation": [e.message for e in validation.get_error()] if validation.is_left() else [],
        }
