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

"""Shipping service for calculating shipping options.

This module encapsulates the logic for turning a payer's shipping address into
the list of shipping options shown by the payment UI: address folding, the
rate-quote request and the selection of the cheapest rate.
"""

import decimal
import logging
from typing import List, Sequence

from config import ShippingSettings
from enums import ResponseStatus
from exceptions import ProviderError
from exceptions import ShippingCalculationError
from models import CurrencyAmount
from models import PaymentAddress
from models import RateQuote
from models import RateRequest
from models import ShippingContact
from models import ShippingOption
from models import ShippingOptionsResponse
from services.address_normalizer import normalize_address
from services.rate_provider import RateProvider

logger = logging.getLogger(__name__)


def build_shipping_options(quotes: Sequence[RateQuote]) -> List[ShippingOption]:
  """Maps rate quotes to shipping options and selects the cheapest one.

  Amounts are compared as decimals. The first quote with a strictly lower
  amount replaces the running minimum, so ties go to the first occurrence.
  Quotes whose amount is not a number are offered but never selected.

  Args:
    quotes: The rate quotes in provider order.

  Returns:
    One shipping option per quote, in the same order, with at most one
    option selected.
  """
  options = []
  min_amount = None
  min_index = -1

  for index, quote in enumerate(quotes):
    try:
      amount = decimal.Decimal(quote.amount)
    except decimal.InvalidOperation:
      amount = None
    if amount is None or not amount.is_finite():
      logger.warning(
          "Ignoring rate %s with non-numeric amount %r",
          quote.object_id,
          quote.amount,
      )
    elif min_amount is None or amount < min_amount:
      min_amount = amount
      min_index = index

    options.append(
        ShippingOption(
            id=quote.object_id,
            label=f"{quote.provider} {quote.servicelevel_name}",
            amount=CurrencyAmount(currency=quote.currency, value=quote.amount),
            selected=False,
        )
    )

  if min_index != -1:
    options[min_index].selected = True

  return options


class ShippingService:
  """Service for handling shipping option calculation."""

  def __init__(self, settings: ShippingSettings, rate_provider: RateProvider):
    self.settings = settings
    self.rate_provider = rate_provider

  def build_rate_request(self, address: PaymentAddress) -> RateRequest:
    """Builds the rate-quote request for shipping the demo parcel."""
    normalized = normalize_address(address)
    destination = ShippingContact(
        name=address.recipient,
        company=address.organization,
        street1=normalized.street1,
        street2=normalized.street2,
        city=address.city,
        state=address.region,
        zip=normalized.postal_code,
        country=address.country,
        phone=address.phone,
        email=self.settings.destination_email,
    )
    return RateRequest(
        address_from=self.settings.origin,
        address_to=destination,
        parcel=self.settings.parcel,
    )

  async def calculate_options(
      self, address: PaymentAddress
  ) -> ShippingOptionsResponse:
    """Calculates the shipping options for an address.

    Args:
      address: The payer's shipping address.

    Returns:
      The success envelope with the shipping options.

    Raises:
      ShippingCalculationError: If the rate provider call fails.
    """
    rate_request = self.build_rate_request(address)
    try:
      quotes = await self.rate_provider.quote(rate_request)
    except ProviderError as e:
      logger.error("Failed to calculate shipping options: %s", e.message)
      raise ShippingCalculationError() from e

    return ShippingOptionsResponse(
        status=ResponseStatus.SUCCESS,
        message="Calculated shipping options",
        shipping_options=build_shipping_options(quotes),
    )
