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

"""Shipping-rate provider clients.

`RateProvider` is the narrow interface the shipping service depends on;
`ShippoRateProvider` talks to the Shippo REST API.
"""

import abc
import logging
from typing import Any, List, Optional

from config import ShippingSettings
from exceptions import ProviderError
from exceptions import ProviderTimeoutError
import httpx
from models import RateQuote
from models import RateRequest

logger = logging.getLogger(__name__)


class RateProvider(abc.ABC):
  """Quotes shipping rates for a shipment."""

  @abc.abstractmethod
  async def quote(self, request: RateRequest) -> List[RateQuote]:
    """Returns the rate quotes for the shipment.

    Raises:
      ProviderError: If the provider cannot be reached or rejects the request.
    """


class ShippoRateProvider(RateProvider):
  """Rate provider backed by the Shippo shipments API."""

  def __init__(
      self,
      settings: ShippingSettings,
      timeout: float,
      transport: Optional[httpx.AsyncBaseTransport] = None,
  ):
    self.settings = settings
    self.timeout = timeout
    self.transport = transport

  def _build_payload(self, request: RateRequest) -> dict[str, Any]:
    return {
        "object_purpose": request.object_purpose,
        "address_from": request.address_from.model_dump(),
        "address_to": request.address_to.model_dump(),
        "parcels": [request.parcel.model_dump()],
        "async": False,
    }

  async def quote(self, request: RateRequest) -> List[RateQuote]:
    if not self.settings.api_key:
      raise ProviderError("Shippo API key is not configured")

    try:
      async with httpx.AsyncClient(
          base_url=self.settings.base_url,
          timeout=self.timeout,
          transport=self.transport,
      ) as client:
        response = await client.post(
            "/shipments/",
            json=self._build_payload(request),
            headers={"Authorization": f"ShippoToken {self.settings.api_key}"},
        )
        response.raise_for_status()
        data = response.json()
    except httpx.TimeoutException as e:
      raise ProviderTimeoutError(f"Shippo request timed out: {e}") from e
    except httpx.HTTPStatusError as e:
      raise ProviderError(
          f"Shippo rejected the shipment: status {e.response.status_code}"
      ) from e
    except httpx.RequestError as e:
      raise ProviderError(f"Network error calling Shippo: {e}") from e
    except ValueError as e:
      raise ProviderError(f"Failed to decode Shippo response: {e}") from e

    quotes = parse_rates(data)
    logger.info("Received %d rate quotes from Shippo", len(quotes))
    return quotes


def parse_rates(data: Any) -> List[RateQuote]:
  """Extracts rate quotes from a Shippo shipment object.

  Current API versions return `rates` with a nested `servicelevel`, older ones
  return `rates_list` with a flat `servicelevel_name`.

  Args:
    data: The decoded shipment object.

  Returns:
    The rate quotes in provider order.

  Raises:
    ProviderError: If the shipment object is not in the expected shape.
  """
  if not isinstance(data, dict):
    raise ProviderError("Unexpected Shippo response")

  raw_rates = data.get("rates")
  if raw_rates is None:
    raw_rates = data.get("rates_list") or []

  quotes = []
  for rate in raw_rates:
    if not isinstance(rate, dict):
      raise ProviderError("Malformed Shippo rate")
    try:
      servicelevel_name = rate.get("servicelevel_name")
      if servicelevel_name is None:
        servicelevel_name = (rate.get("servicelevel") or {}).get("name", "")
      quotes.append(
          RateQuote(
              object_id=rate["object_id"],
              provider=rate.get("provider") or "",
              servicelevel_name=servicelevel_name or "",
              currency=rate.get("currency") or "",
              amount=str(rate.get("amount") or ""),
          )
      )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
      raise ProviderError(f"Malformed Shippo rate: {e}") from e
  return quotes
