"""
Transfers — примитив перевода токенов

Ядро не двигает токены само: операция формирует batch инструкций и передаёт
его TransferPrimitive. Batch применяется целиком или не применяется вовсе.

InMemoryTokenLedger (эталонная реализация для тестов и симуляций)
сначала проверяется весь batch, затем балансы обновляются за один шаг.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Protocol, Sequence

from fxvault.core.errors import TransferFailedError
from fxvault.core.math.checked import U64_MAX, validate_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferInstruction:
    """Перевод amount со счёта source на счёт destination."""

    source: str
    destination: str
    amount: int


class TransferPrimitive(Protocol):
    def execute(self, instructions: Sequence[TransferInstruction]) -> None:
        """
        Атомарное исполнение batch.

        Raises:
            TransferFailedError: batch отклонён, ничего не применено
        """
        ...


class InMemoryTokenLedger:
    """Балансы счетов в памяти с атомарным batch-исполнением."""

    def __init__(self) -> None:
        self._balances: Dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def mint(self, account: str, amount: int) -> None:
        """Зачисление токенов на счёт (эмуляция внешнего пополнения)."""
        validate_amount(amount, "amount")
        with self._lock:
            new_balance = self._balances[account] + amount
            if new_balance > U64_MAX:
                raise TransferFailedError(f"mint overflows balance of {account}")
            self._balances[account] = new_balance

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._balances.get(account, 0)

    def execute(self, instructions: Sequence[TransferInstruction]) -> None:
        with self._lock:
            pending: Dict[str, int] = dict(self._balances)
            for ix in instructions:
                if ix.amount <= 0:
                    raise TransferFailedError(f"non-positive transfer amount {ix.amount}")
                if ix.source == ix.destination:
                    raise TransferFailedError(f"transfer to self on {ix.source}")
                available = pending.get(ix.source, 0)
                if available < ix.amount:
                    raise TransferFailedError(
                        f"insufficient balance on {ix.source}: {available} < {ix.amount}"
                    )
                credited = pending.get(ix.destination, 0) + ix.amount
                if credited > U64_MAX:
                    raise TransferFailedError(f"balance overflow on {ix.destination}")
                pending[ix.source] = available - ix.amount
                pending[ix.destination] = credited

            self._balances.clear()
            self._balances.update(pending)

        for ix in instructions:
            logger.debug("transfer %s → %s: %d", ix.source, ix.destination, ix.amount)
