from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class ConversionRequest(BaseModel):
	from_currency: str = Field(..., min_length=3, max_length=3)
	to_currency: str = Field(..., min_length=3, max_length=3)
	amount: Decimal = Field(..., gt=0)
	on_date: date | None = None

	@field_validator('from_currency', 'to_currency')
	@classmethod
	def uppercase_currency(cls, v: str):
		return v.upper()

	class ConfigDict:
		json_schema_extra = {
			'example': {'from_currency': 'USD', 'to_currency': 'EUR', 'amount': 100.00, 'on_date': '2024-03-15'}
		}
