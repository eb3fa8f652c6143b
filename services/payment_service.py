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

"""Payment service for authorizing wallet payments.

The payment UI hands the server a `PaymentResponse` dictionary whose
`details.paymentMethodToken` is a JSON string produced by the wallet's gateway
tokenization. Its `id` is the processor funding token that gets authorized.
Authorization holds the funds without capturing them.
"""

import json
import logging
from typing import Any

from config import PaymentSettings
from enums import ResponseStatus
from exceptions import InvalidRequestError
from exceptions import ProviderError
from models import ChargeRequest
from models import ResponseEnvelope
from services.payment_processor import PaymentProcessor

logger = logging.getLogger(__name__)


def parse_funding_token(payload: Any, method_name: str) -> str:
  """Validates a payment payload and extracts the funding token id.

  Checks run in order and stop at the first failure: the payload is an
  object, its `methodName` is the supported method, `details` carries a
  `paymentMethodToken` string, and the token decodes to an object with a
  non-empty `id`.

  Args:
    payload: The decoded request body.
    method_name: The supported payment method identifier.

  Returns:
    The funding token id.

  Raises:
    InvalidRequestError: If any check fails.
  """
  if not payload or not isinstance(payload, dict):
    raise InvalidRequestError()

  if payload.get("methodName") != method_name:
    raise InvalidRequestError()

  details = payload.get("details")
  if not isinstance(details, dict):
    raise InvalidRequestError()

  token = details.get("paymentMethodToken")
  if not token or not isinstance(token, str):
    raise InvalidRequestError()

  try:
    token_data = json.loads(token)
  except ValueError as e:
    raise InvalidRequestError() from e

  if not isinstance(token_data, dict):
    raise InvalidRequestError()

  token_id = token_data.get("id")
  if not token_id or not isinstance(token_id, str):
    raise InvalidRequestError()

  return token_id


class PaymentService:
  """Service for authorizing payments with the card-payment processor."""

  def __init__(self, settings: PaymentSettings, processor: PaymentProcessor):
    self.settings = settings
    self.processor = processor

  async def authorize(self, payload: Any) -> ResponseEnvelope:
    """Authorizes the demo charge for a payment payload.

    Validation failures and processor failures are reported identically so
    the caller cannot tell a declined token from a malformed request.

    Args:
      payload: The decoded `/buy` request body.

    Returns:
      The success envelope.

    Raises:
      InvalidRequestError: If validation or authorization fails.
    """
    try:
      token_id = parse_funding_token(payload, self.settings.method_name)
    except InvalidRequestError:
      logger.warning("Rejected malformed payment request")
      raise

    charge = ChargeRequest(
        amount=self.settings.amount,
        currency=self.settings.currency,
        source=token_id,
        description=self.settings.description,
        capture=False,
    )
    try:
      await self.processor.authorize(charge)
    except ProviderError as e:
      logger.error("Payment authorization failed: %s", e.message)
      raise InvalidRequestError() from e

    return ResponseEnvelope(
        status=ResponseStatus.SUCCESS, message="Payment authorized"
    )
