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

"""Console client running the Web Payments checkout against a server.

A scripted payment UI stands in for the browser's payment sheet:
1. It reports the shipping address given on the command line.
2. It keeps the shipping option the server selected (the cheapest).
3. It approves the payment with either a wallet token or a test card.

Usage:
  python -m client.console_client --server_url=http://localhost:8080 \
      --token_id=tok_visa
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from client.checkout_flow import ANDROID_PAY_METHOD
from client.checkout_flow import CheckoutFlow
from client.checkout_flow import PaymentAbortedError
from client.checkout_flow import PaymentRequest
from client.checkout_flow import PaymentResponse
from client.checkout_flow import PaymentUi
from client.checkout_flow import PaymentUiError
from enums import ResponseStatus
import httpx
from models import PaymentAddress

logger = logging.getLogger(__name__)


class ScriptedPaymentUi(PaymentUi):
  """Payment UI that approves a predefined payment without user input."""

  def __init__(
      self,
      address: PaymentAddress,
      payer_name: str,
      token_id: Optional[str] = None,
      card_number: Optional[str] = None,
  ):
    self.address = address
    self.payer_name = payer_name
    self.token_id = token_id
    self.card_number = card_number
    self.paying = False

  async def show(
      self, request: PaymentRequest, flow: CheckoutFlow
  ) -> PaymentResponse:
    logger.info(
        "Showing payment sheet for %s %s",
        request.details.total.amount.value,
        request.details.total.amount.currency,
    )
    details = await flow.on_shipping_address_change(self.address)
    if not details.shipping_options:
      raise PaymentAbortedError("No shipping options for this address.")

    selected = next(
        (option for option in details.shipping_options if option.selected),
        details.shipping_options[0],
    )
    details = await flow.on_shipping_option_change(selected.id)
    logger.info(
        "Paying %s %s with %s",
        details.total.amount.value,
        details.total.amount.currency,
        selected.label,
    )

    self.paying = True
    if self.token_id:
      return PaymentResponse(
          method_name=ANDROID_PAY_METHOD,
          details={"paymentMethodToken": json.dumps({"id": self.token_id})},
          shipping_address=self.address,
          shipping_option=selected.id,
          payer_name=self.payer_name,
      )
    return PaymentResponse(
        method_name="basic-card",
        details={
            "cardholderName": self.payer_name,
            "cardNumber": self.card_number or "",
            "cardSecurityCode": "123",
        },
        shipping_address=self.address,
        shipping_option=selected.id,
        payer_name=self.payer_name,
    )

  async def abort(self) -> None:
    if self.paying:
      raise PaymentUiError("Payment is in progress.")

  async def complete(
      self, response: PaymentResponse, result: ResponseStatus
  ) -> None:
    logger.info("Payment sheet closed with result: %s", result.value)


async def run_checkout(args: argparse.Namespace) -> int:
  address = PaymentAddress(
      recipient=args.recipient,
      address_line=args.address_line,
      city=args.city,
      region=args.region,
      postal_code=args.postal_code,
      country=args.country,
  )
  ui = ScriptedPaymentUi(
      address,
      payer_name=args.recipient,
      token_id=args.token_id,
      card_number=args.card_number,
  )
  async with httpx.AsyncClient(base_url=args.server_url) as client:
    flow = CheckoutFlow(
        client, ui, stripe_publishable_key=args.stripe_publishable_key
    )
    result = await flow.checkout()

  print(f"{result.status.value}: {result.message}")
  return 0 if result.status == ResponseStatus.SUCCESS else 1


def main() -> None:

  parser = argparse.ArgumentParser()

  parser.add_argument(
      "--server_url",
      default="http://localhost:8080",
      help="Base URL of the Web Payments demo server",
  )
  parser.add_argument(
      "--stripe_publishable_key",
      default="pk_test_placeholder",
      help="Publishable key for the wallet's gateway tokenization",
  )
  parser.add_argument(
      "--token_id",
      default=None,
      help="Funding token id to pay with the platform wallet",
  )
  parser.add_argument(
      "--card_number",
      default="4111111111111111",
      help="Card number for a simulated basic-card payment",
  )
  parser.add_argument("--recipient", default="Jane Doe")
  parser.add_argument(
      "--address_line", action="append", default=None, help="Repeatable"
  )
  parser.add_argument("--city", default="Mountain View")
  parser.add_argument("--region", default="CA")
  parser.add_argument("--postal_code", default="94043")
  parser.add_argument("--country", default="US")

  args = parser.parse_args()
  if args.address_line is None:
    args.address_line = ["1600 Amphitheatre Pkwy"]

  # Configure Logging

  logging.basicConfig(
      level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
  )

  sys.exit(asyncio.run(run_checkout(args)))


if __name__ == "__main__":
  main()
