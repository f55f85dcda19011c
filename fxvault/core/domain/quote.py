"""
PriceQuote — проверенная котировка внешнего фида

Строится только адаптером фида после проверок знака, нуля и staleness
(см. fxvault.oracle). Цена нормализована к масштабу 10^9.
"""

from pydantic import BaseModel, Field

from fxvault.core.math.checked import U64_MAX


class PriceQuote(BaseModel):
    """Котировка target за 1 source (× 10^9)."""

    base_currency: str = Field(..., min_length=1, description="Source валюта")
    quote_currency: str = Field(..., min_length=1, description="Target валюта")
    price: int = Field(..., gt=0, le=U64_MAX, description="Цена × 10^9")
    publish_ts: int = Field(..., ge=0, description="Время публикации (unix, сек)")
    age_seconds: int = Field(..., ge=0, description="Возраст на момент чтения")

    model_config = {"frozen": True}

    def is_stale(self, max_age_seconds: int) -> bool:
        """Возраст строго больше max_age"""
        return self.age_seconds > max_age_seconds
