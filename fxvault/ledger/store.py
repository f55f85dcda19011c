"""
VaultStore — keyed хранилище vault и LP позиций

Хранилище принадлежит exchange-сервису (никаких глобальных реестров).
Конкурентность:
- на каждый vault свой threading.RLock
- операции над двумя vault берут оба lock в порядке сортировки валют
- claim-ы сериализуются на уровне vault, а не позиции
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from fxvault.core.domain.position import LiquidityPosition
from fxvault.core.domain.vault import Vault
from fxvault.core.errors import VaultAlreadyExistsError, VaultNotFoundError

PositionKey = Tuple[str, str]


class VaultStore:
    """In-memory хранилище состояния exchange."""

    def __init__(self) -> None:
        self._vaults: Dict[str, Vault] = {}
        self._positions: Dict[PositionKey, LiquidityPosition] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Vaults
    # -------------------------------------------------------------------------

    def add_vault(self, vault: Vault) -> None:
        """
        Регистрация нового vault.

        Raises:
            VaultAlreadyExistsError: vault для валюты уже создан
        """
        with self._registry_lock:
            if vault.currency in self._vaults:
                raise VaultAlreadyExistsError(f"vault {vault.currency} already exists")
            self._locks[vault.currency] = threading.RLock()
            self._vaults[vault.currency] = vault

    def get_vault(self, currency: str) -> Vault:
        """
        Raises:
            VaultNotFoundError: vault не инициализирован
        """
        try:
            return self._vaults[currency]
        except KeyError:
            raise VaultNotFoundError(f"vault {currency} not found") from None

    def put_vault(self, vault: Vault) -> None:
        """Замена существующего vault (вызывать под lock_vaults)."""
        if vault.currency not in self._vaults:
            raise VaultNotFoundError(f"vault {vault.currency} not found")
        self._vaults[vault.currency] = vault

    def currencies(self) -> List[str]:
        return sorted(self._vaults)

    # -------------------------------------------------------------------------
    # Positions
    # -------------------------------------------------------------------------

    def find_position(self, currency: str, provider: str) -> Optional[LiquidityPosition]:
        return self._positions.get((currency, provider))

    def get_position(self, currency: str, provider: str) -> LiquidityPosition:
        """
        Позиция провайдера; пустая позиция, если провайдер ещё не вносил ликвидность.

        Raises:
            VaultNotFoundError: vault не инициализирован
        """
        self.get_vault(currency)
        position = self._positions.get((currency, provider))
        if position is None:
            return LiquidityPosition(currency=currency, provider=provider)
        return position

    def put_position(self, position: LiquidityPosition) -> None:
        """Сохранение позиции (вызывать под lock_vaults её vault)."""
        self.get_vault(position.currency)
        self._positions[position.key] = position

    def positions_for(self, currency: str) -> List[LiquidityPosition]:
        return [p for key, p in sorted(self._positions.items()) if key[0] == currency]

    # -------------------------------------------------------------------------
    # Locks
    # -------------------------------------------------------------------------

    @contextmanager
    def lock_vaults(self, *currencies: str) -> Iterator[None]:
        """
        Захват lock-ов vault в глобальном порядке (сортировка валют).

        Raises:
            VaultNotFoundError: Любой из vault не инициализирован
        """
        ordered = sorted(set(currencies))
        locks = []
        for currency in ordered:
            lock = self._locks.get(currency)
            if lock is None:
                raise VaultNotFoundError(f"vault {currency} not found")
            locks.append(lock)

        acquired: List[threading.RLock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
