#   Copyright 2026 UCP Authors
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.

"""Models for the Web Payments demo.

The wire contract with the browser uses the camelCase field names of the
Payment Request API (e.g. `addressLine`, `shippingOptions`). The models keep
snake_case attributes and serialize through aliases, so callers dump them with
`model_dump(mode="json", by_alias=True)`.

Provider-facing models (`RateRequest`, `ChargeRequest`) use the field names of
the third-party APIs directly.
"""

from typing import Any

from enums import ResponseStatus
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
  """Base model serializing to the camelCase wire names."""

  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentAddress(CamelModel):
  """Shipping address reported by the platform payment UI."""

  recipient: str = ""
  organization: str = ""
  address_line: list[str] = Field(default_factory=list)
  dependent_locality: str = ""
  city: str = ""
  region: str = ""
  postal_code: str = ""
  sorting_code: str = ""
  country: str = ""
  phone: str = ""

  @field_validator(
      "recipient",
      "organization",
      "dependent_locality",
      "city",
      "region",
      "postal_code",
      "sorting_code",
      "country",
      "phone",
      mode="before",
  )
  @classmethod
  def _none_to_empty(cls, value: Any) -> Any:
    # Browsers report missing address parts as null.
    return "" if value is None else value

  @field_validator("address_line", mode="before")
  @classmethod
  def _none_to_empty_list(cls, value: Any) -> Any:
    return [] if value is None else value


class NormalizedAddress(BaseModel):
  """Address folded into the two-line street format of the rate provider."""

  model_config = ConfigDict(frozen=True)

  street1: str = ""
  street2: str = ""
  postal_code: str = ""


class CurrencyAmount(CamelModel):
  currency: str
  value: str


class ShippingOption(CamelModel):
  """A shipping option offered to the payer."""

  id: str
  label: str
  amount: CurrencyAmount
  selected: bool = False


class ResponseEnvelope(CamelModel):
  """Uniform response returned by the checkout endpoints."""

  status: ResponseStatus
  message: str


class ShippingOptionsResponse(ResponseEnvelope):
  shipping_options: list[ShippingOption] = Field(default_factory=list)


# --- Shipping-rate provider models ---


class ShippingContact(BaseModel):
  """Sender or recipient record in the shape the rate provider expects."""

  object_purpose: str = "PURCHASE"
  name: str = ""
  company: str = ""
  street1: str = ""
  street2: str = ""
  city: str = ""
  state: str = ""
  zip: str = ""
  country: str = ""
  phone: str = ""
  email: str = ""


class Parcel(BaseModel):
  """Parcel dimensions, kept as strings like the rate provider does."""

  length: str = "5"
  width: str = "5"
  height: str = "5"
  distance_unit: str = "in"
  weight: str = "2"
  mass_unit: str = "lb"


class RateRequest(BaseModel):
  """Rate-quote request sent to the shipping-rate provider."""

  object_purpose: str = "PURCHASE"
  address_from: ShippingContact
  address_to: ShippingContact
  parcel: Parcel


class RateQuote(BaseModel):
  """A single shipping-cost offer returned by the rate provider."""

  object_id: str
  provider: str = ""
  servicelevel_name: str = ""
  currency: str = ""
  amount: str = ""


# --- Payment processor models ---


class ChargeRequest(BaseModel):
  """Charge-creation request sent to the card-payment processor."""

  amount: int
  currency: str
  source: str
  description: str = ""
  capture: bool = False


class ChargeConfirmation(BaseModel):
  """Charge confirmation returned by the card-payment processor."""

  id: str
  status: str = ""
  captured: bool = False
