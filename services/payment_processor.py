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

"""Card-payment processor clients."""

import abc
import logging
from typing import Optional

from config import PaymentSettings
from exceptions import ProviderError
from exceptions import ProviderTimeoutError
import httpx
from models import ChargeConfirmation
from models import ChargeRequest

logger = logging.getLogger(__name__)


class PaymentProcessor(abc.ABC):
  """Authorizes charges against a funding token."""

  @abc.abstractmethod
  async def authorize(self, request: ChargeRequest) -> ChargeConfirmation:
    """Creates the charge described by the request.

    Raises:
      ProviderError: If the processor cannot be reached or declines the
        charge.
    """


class StripePaymentProcessor(PaymentProcessor):
  """Payment processor backed by the Stripe charges API."""

  def __init__(
      self,
      settings: PaymentSettings,
      timeout: float,
      transport: Optional[httpx.AsyncBaseTransport] = None,
  ):
    self.settings = settings
    self.timeout = timeout
    self.transport = transport

  async def authorize(self, request: ChargeRequest) -> ChargeConfirmation:
    if not self.settings.api_key:
      raise ProviderError("Stripe API key is not configured")

    # Stripe takes form-encoded parameters with lowercase booleans.
    form = {
        "amount": str(request.amount),
        "currency": request.currency,
        "source": request.source,
        "description": request.description,
        "capture": "true" if request.capture else "false",
    }

    try:
      async with httpx.AsyncClient(
          base_url=self.settings.base_url,
          timeout=self.timeout,
          transport=self.transport,
      ) as client:
        response = await client.post(
            "/v1/charges", data=form, auth=(self.settings.api_key, "")
        )
        if response.status_code != 200:
          raise ProviderError(
              "Stripe declined the charge: status"
              f" {response.status_code}, {_error_message(response)}"
          )
        confirmation = ChargeConfirmation.model_validate(response.json())
    except httpx.TimeoutException as e:
      raise ProviderTimeoutError(f"Stripe request timed out: {e}") from e
    except httpx.RequestError as e:
      raise ProviderError(f"Network error calling Stripe: {e}") from e
    except ValueError as e:
      raise ProviderError(f"Failed to decode Stripe response: {e}") from e

    logger.info(
        "Stripe authorized charge %s (captured=%s)",
        confirmation.id,
        confirmation.captured,
    )
    return confirmation


def _error_message(response: httpx.Response) -> str:
  """Extracts the error message from a Stripe error response."""
  try:
    error = response.json().get("error") or {}
  except (ValueError, AttributeError):
    return "no error details"
  if not isinstance(error, dict):
    return str(error)
  return error.get("message") or error.get("type") or "no error details"
