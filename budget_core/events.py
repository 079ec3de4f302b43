from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

from budget_core.config import CURRENCY
from budget_core.money import format_money

__all__ = ['event_bus', 'BUDGET_SAVED', 'BUDGET_DELETED', 'BALANCE_ALERT', 'Event', 'EventBus']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


BUDGET_SAVED = "BUDGET_SAVED"
BUDGET_DELETED = "BUDGET_DELETED"
BALANCE_ALERT = "BALANCE_ALERT"

event_bus = EventBus()


def budget_saved_handler(event: Event, payload: dict) -> dict:
    return {"budget_id": payload.get("budget_id"), "saved_at": event.ts}


def check_balance_handler(event: Event, payload: dict) -> dict:
    member = payload.get("member", "")
    balance = payload.get("balance", 0)
    threshold = payload.get("threshold", 0)

    if balance < threshold:
        return {
            "alert": f"Balance for {member} is {format_money(balance, payload.get('currency', CURRENCY))}",
            "member": member,
            "balance": balance,
            "threshold": threshold,
        }
    return {}


def register_default_handlers(bus: EventBus = event_bus) -> None:
    bus.subscribe(BUDGET_SAVED, budget_saved_handler)
    bus.subscribe(BALANCE_ALERT, check_balance_handler)


register_default_handlers()
