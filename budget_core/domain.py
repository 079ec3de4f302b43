from dataclasses import dataclass, field
from typing import Optional

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class CommitmentItem:
    id: str
    name: str
    remark: str = ""
    amounts: dict = field(default_factory=dict)      # member -> cents
    paid_status: dict = field(default_factory=dict)  # member -> bool


@dataclass(frozen=True)
class CommitmentGroup:
    id: str
    name: str
    items: tuple[CommitmentItem, ...] = ()
    is_expanded: bool = True  # UI only


@dataclass(frozen=True)
class Budget:
    id: str
    name: str
    month: str
    year: int
    members: tuple[str, ...] = ()
    commitments: tuple[CommitmentGroup, ...] = ()
    salaries: dict = field(default_factory=dict)           # member -> cents
    total_commitments: dict = field(default_factory=dict)  # derived
    balance: dict = field(default_factory=dict)            # derived
    created_at: str = ""


# Derived per-member aggregates, all in cents
@dataclass(frozen=True)
class Totals:
    total_commitments: dict
    paid_amounts: dict
    unpaid_amounts: dict
    balance: dict


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email
