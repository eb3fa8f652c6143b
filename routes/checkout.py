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

"""Checkout routes: shipping option negotiation and payment authorization.

Both endpoints answer HTTP 200 with a `{status, message}` envelope; failures
are raised as `CheckoutError` and rendered by the server's exception handler.
"""

from typing import Any

import dependencies
from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from models import PaymentAddress
from services.payment_service import PaymentService
from services.shipping_service import ShippingService

router = APIRouter()


@router.post(
    "/ship",
    response_model=dict[str, Any],
    operation_id="calculate_shipping",
    summary="Calculate Shipping Options",
)
async def calculate_shipping(
    address: PaymentAddress = Body(...),
    shipping_service: ShippingService = Depends(
        dependencies.get_shipping_service
    ),
) -> dict[str, Any]:
  """Calculates the shipping options for the payer's address."""
  result = await shipping_service.calculate_options(address)
  return result.model_dump(mode="json", by_alias=True)


@router.post(
    "/buy",
    response_model=dict[str, Any],
    operation_id="authorize_payment",
    summary="Authorize Payment",
)
async def authorize_payment(
    payload: Any = Body(None),
    payment_service: PaymentService = Depends(
        dependencies.get_payment_service
    ),
) -> dict[str, Any]:
  """Authorizes USD $0.50 against the wallet's payment token."""
  # The body is validated by the service so that every malformed payment
  # answers with the same envelope.
  result = await payment_service.authorize(payload)
  return result.model_dump(mode="json", by_alias=True)
