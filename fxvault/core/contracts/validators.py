"""
JSON Schema Contract Validators

Модуль для валидации запросов операций и конфигурации согласно формальным
JSON Schema контрактам. Использует библиотеку jsonschema (Draft 2020-12).

Схемы (fxvault/core/contracts/schema/):
- initialize_vault_request.json
- deposit_request.json / withdraw_request.json
- swap_request.json
- claim_rewards_request.json
- distribute_fees_request.json
- rebalance_request.json
- exchange_config.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Type

import jsonschema
from jsonschema import Draft202012Validator, ValidationError
from pydantic import BaseModel

from fxvault.core.domain.requests import (
    ClaimRewardsRequest,
    DepositRequest,
    DistributeFeesRequest,
    InitializeVaultRequest,
    RebalanceRequest,
    SwapRequest,
    WithdrawRequest,
)


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются как package data рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'swap_request')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation самой схемы
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


class InitializeVaultRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("initialize_vault_request")


class DepositRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("deposit_request")


class WithdrawRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("withdraw_request")


class SwapRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("swap_request")


class ClaimRewardsRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("claim_rewards_request")


class DistributeFeesRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("distribute_fees_request")


class RebalanceRequestValidator(ContractValidator):
    def __init__(self):
        super().__init__("rebalance_request")


class ExchangeConfigValidator(ContractValidator):
    def __init__(self):
        super().__init__("exchange_config")


# =============================================================================
# REQUEST PARSING
# =============================================================================

_REQUEST_CONTRACTS: Dict[str, tuple[Type[ContractValidator], Type[BaseModel]]] = {
    "initialize_vault": (InitializeVaultRequestValidator, InitializeVaultRequest),
    "deposit": (DepositRequestValidator, DepositRequest),
    "withdraw": (WithdrawRequestValidator, WithdrawRequest),
    "swap": (SwapRequestValidator, SwapRequest),
    "claim_rewards": (ClaimRewardsRequestValidator, ClaimRewardsRequest),
    "distribute_protocol_fees": (DistributeFeesRequestValidator, DistributeFeesRequest),
    "rebalance": (RebalanceRequestValidator, RebalanceRequest),
}

OPERATIONS: tuple[str, ...] = tuple(_REQUEST_CONTRACTS)


def parse_request(operation: str, payload: Dict[str, Any]) -> BaseModel:
    """
    Валидация payload по контракту и построение модели запроса.

    Args:
        operation: Имя операции (см. OPERATIONS)
        payload: Сырые данные запроса

    Returns:
        Pydantic модель запроса

    Raises:
        KeyError: Неизвестная операция
        ValidationError: Нарушение JSON Schema
        pydantic.ValidationError: Нарушение межполевых правил модели
    """
    if operation not in _REQUEST_CONTRACTS:
        raise KeyError(f"Unknown operation: {operation}")
    validator_cls, model_cls = _REQUEST_CONTRACTS[operation]
    validator_cls().validate(payload)
    return model_cls.model_validate(payload)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_swap_request(data: Dict[str, Any]) -> None:
    SwapRequestValidator().validate(data)


def validate_deposit_request(data: Dict[str, Any]) -> None:
    DepositRequestValidator().validate(data)


def validate_withdraw_request(data: Dict[str, Any]) -> None:
    WithdrawRequestValidator().validate(data)


def validate_rebalance_request(data: Dict[str, Any]) -> None:
    RebalanceRequestValidator().validate(data)


def validate_exchange_config(data: Dict[str, Any]) -> None:
    """
    Валидация словаря конфигурации exchange.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ExchangeConfigValidator().validate(data)
