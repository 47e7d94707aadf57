from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CheckoutSessionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # both optional here so a missing field is a 400 with our error body, not a 422
    price_id: Optional[str] = Field(default=None, alias="priceId")
    telegram_id: Optional[Union[int, str]] = Field(default=None, alias="telegramId")


class CheckoutSessionOut(BaseModel):
    url: str
