"""Pure operations over a group's embedded material ledger.

A ledger is the ``materials`` array stored on a site or store document: a list
of entries ``{id, name, unit, amount, location}``. Every function here returns
a new list and leaves its arguments untouched, so callers can compute the next
state and write the whole array back in one go.

Invariant: no entry with ``amount <= 0`` survives an operation.
"""

from __future__ import annotations

import copy
import math
import uuid
from typing import Any

from oneman.errors import InsufficientQuantity, InvalidAmount, MaterialNotFound

from .models import LedgerEntry

# Decimal places kept for every stored quantity.
AMOUNT_PRECISION = 9


def new_entry_id() -> str:
    """Return a collision-resistant id for a ledger entry."""
    return uuid.uuid4().hex


def parse_amount(value: Any) -> int | float:
    """Coerce user input into a positive quantity, rounded to ledger precision.

    Raises:
        InvalidAmount: If the value is not a finite number greater than zero.
    """
    if isinstance(value, bool):
        raise InvalidAmount()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidAmount() from None
    if not math.isfinite(amount):
        raise InvalidAmount()
    amount = normalize_amount(amount)
    if amount <= 0:
        raise InvalidAmount()
    return amount


def normalize_amount(amount: float) -> int | float:
    """Round ``amount`` to ``AMOUNT_PRECISION`` places.

    Firestore keeps ints and doubles apart, so whole quantities become ints.
    """
    amount = round(float(amount), AMOUNT_PRECISION)
    return int(amount) if amount.is_integer() else amount


def find_entry(
    ledger: list[LedgerEntry], name: str, unit: str
) -> LedgerEntry | None:
    """Return the first entry matching the natural key ``(name, unit)``."""
    for entry in ledger:
        if entry.get("name") == name and entry.get("unit") == unit:
            return entry
    return None


def total(ledger: list[LedgerEntry], name: str, unit: str) -> int | float:
    """Sum the amounts held under ``(name, unit)``."""
    return normalize_amount(
        sum(
            e.get("amount", 0)
            for e in ledger
            if e.get("name") == name and e.get("unit") == unit
        )
    )


def add(
    ledger: list[LedgerEntry],
    name: str,
    unit: str,
    amount: Any,
    location_label: str,
) -> list[LedgerEntry]:
    """Add ``amount`` of a material, merging into an existing ``(name, unit)``."""
    amount = parse_amount(amount)
    updated = copy.deepcopy(ledger)
    entry = find_entry(updated, name, unit)
    if entry is not None:
        entry["amount"] = normalize_amount(entry.get("amount", 0) + amount)
        entry["location"] = location_label
    else:
        updated.append(
            {
                "id": new_entry_id(),
                "name": name,
                "unit": unit,
                "amount": amount,
                "location": location_label,
            }
        )
    return updated


def _decrement(
    updated: list[LedgerEntry], entry: LedgerEntry, amount: float
) -> list[LedgerEntry]:
    current = normalize_amount(entry.get("amount", 0))
    amount = normalize_amount(amount)
    if amount > current:
        raise InsufficientQuantity(
            f"Only {current} {entry.get('unit', '')} of "
            f"{entry.get('name', 'this material')} available."
        )
    remaining = normalize_amount(current - amount)
    if remaining <= 0:
        updated.remove(entry)
    else:
        entry["amount"] = remaining
    return updated


def remove(ledger: list[LedgerEntry], entry_id: str, amount: Any) -> list[LedgerEntry]:
    """Remove ``amount`` from the entry identified by ``entry_id``."""
    amount = parse_amount(amount)
    updated = copy.deepcopy(ledger)
    for entry in updated:
        if entry.get("id") == entry_id:
            return _decrement(updated, entry, amount)
    raise MaterialNotFound()


def remove_by_key(
    ledger: list[LedgerEntry], name: str, unit: str, amount: Any
) -> list[LedgerEntry]:
    """Remove ``amount`` from the entry matching ``(name, unit)``."""
    amount = parse_amount(amount)
    updated = copy.deepcopy(ledger)
    entry = find_entry(updated, name, unit)
    if entry is None:
        raise MaterialNotFound(f"{name} ({unit}) is not in stock.")
    return _decrement(updated, entry, amount)


def transfer(
    source: list[LedgerEntry],
    dest: list[LedgerEntry],
    name: str,
    unit: str,
    amount: Any,
    dest_label: str,
) -> tuple[list[LedgerEntry], list[LedgerEntry]]:
    """Move ``amount`` of ``(name, unit)`` from ``source`` into ``dest``.

    The total quantity across both ledgers is unchanged. If the source cannot
    cover the amount the error is raised before either side is computed.
    """
    new_source = remove_by_key(source, name, unit, amount)
    new_dest = add(dest, name, unit, amount, dest_label)
    return new_source, new_dest
