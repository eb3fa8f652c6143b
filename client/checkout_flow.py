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

"""Client side of the Web Payments checkout.

`CheckoutFlow` drives a platform payment UI (the browser's Payment Request
implementation, abstracted as `PaymentUi`) against the demo server:

1. Builds the payment request for USD $0.50 plus shipping.
2. Calls `POST /ship` whenever the payer changes the shipping address or the
   shipping option, and updates the displayed totals.
3. On approval with the platform wallet, calls `POST /buy` once and reports
   the outcome back to the payment UI.
4. Aborts the session when the payer has not finished within 20 minutes.

Nothing is retried; a failed shipping calculation or authorization is final
for that attempt.
"""

import abc
import asyncio
import dataclasses
import decimal
import json
import logging
from typing import Any, List, Optional

from enums import ResponseStatus
import httpx
from models import CamelModel
from models import CurrencyAmount
from models import PaymentAddress
from models import ShippingOption
from pydantic import Field

logger = logging.getLogger(__name__)

ANDROID_PAY_METHOD = "https://android.com/pay"
CARD_NETWORKS = [
    "visa",
    "mastercard",
    "amex",
    "discover",
    "diners",
    "jcb",
    "unionpay",
    "mir",
]
WALLET_CARD_NETWORKS = ["AMEX", "MASTERCARD", "VISA", "DISCOVER"]
DEFAULT_MERCHANT_ID = "00184145120947117657"
STRIPE_API_VERSION = "2016-07-06"

CURRENCY = "USD"
SUBTOTAL = decimal.Decimal("0.50")
SESSION_TIMEOUT_SECONDS = 20 * 60
SIMULATION_DELAY_SECONDS = 5.0

SHIPPING_UNAVAILABLE_MESSAGE = "Unable to calculate shipping options."


class PaymentUiError(Exception):
  """Raised by the payment UI when it refuses or fails an operation."""


class PaymentAbortedError(PaymentUiError):
  """Raised when the payment UI was closed without a payment."""


class PaymentItem(CamelModel):
  label: str
  amount: CurrencyAmount


class PaymentDetails(CamelModel):
  """Totals and shipping options displayed by the payment UI."""

  total: PaymentItem
  display_items: List[PaymentItem] = Field(default_factory=list)
  shipping_options: Optional[List[ShippingOption]] = None


class PaymentMethodData(CamelModel):
  supported_methods: List[str]
  data: Optional[dict[str, Any]] = None


class PaymentOptions(CamelModel):
  request_shipping: bool = True
  request_payer_name: bool = True
  request_payer_phone: bool = True
  request_payer_email: bool = True
  shipping_type: str = "shipping"


class PaymentRequest(CamelModel):
  """Everything the payment UI needs to show the payment sheet."""

  method_data: List[PaymentMethodData]
  details: PaymentDetails
  options: PaymentOptions = Field(default_factory=PaymentOptions)


class PaymentResponse(CamelModel):
  """The payer's approved instrument, as reported by the payment UI."""

  method_name: str
  details: dict[str, Any] = Field(default_factory=dict)
  shipping_address: Optional[PaymentAddress] = None
  shipping_option: Optional[str] = None
  payer_name: Optional[str] = None
  payer_phone: Optional[str] = None
  payer_email: Optional[str] = None


class PaymentUi(abc.ABC):
  """The platform payment UI."""

  @abc.abstractmethod
  async def show(
      self, request: PaymentRequest, flow: "CheckoutFlow"
  ) -> PaymentResponse:
    """Shows the payment sheet until the payer approves a payment.

    Shipping changes are reported through `flow.on_shipping_address_change`
    and `flow.on_shipping_option_change`, whose returned details must be
    displayed.

    Raises:
      PaymentAbortedError: If the payer closed the sheet or it was aborted.
    """

  @abc.abstractmethod
  async def abort(self) -> None:
    """Closes the payment sheet.

    Raises:
      PaymentUiError: If the payer is in the middle of paying.
    """

  @abc.abstractmethod
  async def complete(
      self, response: PaymentResponse, result: ResponseStatus
  ) -> None:
    """Tells the payment UI whether the payment succeeded.

    Raises:
      PaymentUiError: If the UI cannot be completed anymore.
    """


@dataclasses.dataclass(frozen=True)
class CheckoutResult:
  status: ResponseStatus
  message: str


def format_amount(value: decimal.Decimal) -> str:
  return str(value.quantize(decimal.Decimal("0.01")))


def instrument_to_dict(response: PaymentResponse) -> dict[str, Any]:
  """Converts an approved instrument into the `/buy` request dictionary.

  Card numbers keep only the digits after the twelfth and the security code
  is hidden, so the dictionary can be shown to the payer.
  """
  details = dict(response.details)
  if "cardNumber" in details:
    details["cardNumber"] = "XXXX-XXXX-XXXX-" + str(details["cardNumber"])[12:]
  if "cardSecurityCode" in details:
    details["cardSecurityCode"] = "***"

  shipping_address = None
  if response.shipping_address is not None:
    shipping_address = response.shipping_address.model_dump(
        mode="json", by_alias=True
    )

  return {
      "methodName": response.method_name,
      "details": details,
      "shippingAddress": shipping_address,
      "shippingOption": response.shipping_option,
      "payerName": response.payer_name,
      "payerPhone": response.payer_phone,
      "payerEmail": response.payer_email,
  }


class CheckoutFlow:
  """Runs one checkout session against the demo server."""

  def __init__(
      self,
      client: httpx.AsyncClient,
      ui: PaymentUi,
      stripe_publishable_key: str,
      merchant_id: str = DEFAULT_MERCHANT_ID,
      session_timeout: float = SESSION_TIMEOUT_SECONDS,
      simulation_delay: float = SIMULATION_DELAY_SECONDS,
  ):
    self.client = client
    self.ui = ui
    self.stripe_publishable_key = stripe_publishable_key
    self.merchant_id = merchant_id
    self.session_timeout = session_timeout
    self.simulation_delay = simulation_delay
    self.output: List[str] = []
    self.shipping_address: Optional[PaymentAddress] = None
    self.details = PaymentDetails(
        total=PaymentItem(
            label="Total",
            amount=CurrencyAmount(
                currency=CURRENCY, value=format_amount(SUBTOTAL)
            ),
        )
    )

  def report(self, message: str) -> None:
    """Shows a message in the page's live output."""
    self.output.append(message)
    logger.info(message)

  def build_payment_request(self) -> PaymentRequest:
    wallet = PaymentMethodData(
        supported_methods=[ANDROID_PAY_METHOD],
        data={
            "merchantName": "Web Payments Demo",
            "allowedCardNetworks": WALLET_CARD_NETWORKS,
            "merchantId": self.merchant_id,
            "paymentMethodTokenizationParameters": {
                "tokenizationType": "GATEWAY_TOKEN",
                "parameters": {
                    "gateway": "stripe",
                    "stripe:publishableKey": self.stripe_publishable_key,
                    "stripe:version": STRIPE_API_VERSION,
                },
            },
        },
    )
    basic_card = PaymentMethodData(
        supported_methods=["basic-card"],
        data={
            "supportedNetworks": CARD_NETWORKS,
            "supportedTypes": ["debit", "credit", "prepaid"],
        },
    )
    return PaymentRequest(
        method_data=[
            wallet,
            PaymentMethodData(supported_methods=list(CARD_NETWORKS)),
            basic_card,
        ],
        details=self.details.model_copy(deep=True),
    )

  # --- Shipping ---

  async def on_shipping_address_change(
      self, address: PaymentAddress
  ) -> PaymentDetails:
    """Recalculates the shipping options for a new address."""
    self.shipping_address = address
    return await self._update_shipping(None)

  async def on_shipping_option_change(self, option_id: str) -> PaymentDetails:
    """Refreshes the shipping options, keeping the payer's choice selected."""
    return await self._update_shipping(option_id)

  async def _update_shipping(self, selected_id: Optional[str]) -> PaymentDetails:
    if self.shipping_address is None:
      return self._cannot_ship(SHIPPING_UNAVAILABLE_MESSAGE)

    try:
      response = await self.client.post(
          "/ship",
          json=self.shipping_address.model_dump(mode="json", by_alias=True),
      )
    except httpx.HTTPError as e:
      return self._cannot_ship(f"{SHIPPING_UNAVAILABLE_MESSAGE} {e}")

    if not response.is_success:
      return self._cannot_ship(SHIPPING_UNAVAILABLE_MESSAGE)

    try:
      envelope = response.json()
      if envelope.get("status") != ResponseStatus.SUCCESS.value:
        return self._cannot_ship(SHIPPING_UNAVAILABLE_MESSAGE)
      options = [
          ShippingOption.model_validate(option)
          for option in envelope.get("shippingOptions") or []
      ]
    except (ValueError, AttributeError) as e:
      return self._cannot_ship(f"{SHIPPING_UNAVAILABLE_MESSAGE} {e}")

    if selected_id and any(option.id == selected_id for option in options):
      for option in options:
        option.selected = option.id == selected_id

    return self._can_ship(options)

  def _can_ship(self, options: List[ShippingOption]) -> PaymentDetails:
    selected = None
    for option in options:
      if option.selected:
        selected = option

    total = SUBTOTAL
    if selected is not None:
      try:
        total = SUBTOTAL + decimal.Decimal(selected.amount.value)
      except decimal.InvalidOperation:
        return self._cannot_ship(SHIPPING_UNAVAILABLE_MESSAGE)

    display_items = [
        PaymentItem(
            label="Sub-total",
            amount=CurrencyAmount(
                currency=CURRENCY, value=format_amount(SUBTOTAL)
            ),
        )
    ]
    if selected is not None:
      display_items.insert(
          0, PaymentItem(label=selected.label, amount=selected.amount)
      )

    self.details = PaymentDetails(
        total=PaymentItem(
            label="Total",
            amount=CurrencyAmount(currency=CURRENCY, value=format_amount(total)),
        ),
        display_items=display_items,
        shipping_options=options,
    )
    return self.details.model_copy(deep=True)

  def _cannot_ship(self, message: str) -> PaymentDetails:
    self.report(message)
    self.details = self.details.model_copy(update={"shipping_options": None})
    return self.details.model_copy(deep=True)

  # --- Payment ---

  async def checkout(self) -> CheckoutResult:
    """Shows the payment sheet and processes the approved payment."""
    request = self.build_payment_request()
    show_task = asyncio.ensure_future(self.ui.show(request, self))
    try:
      response = await self._wait_for_payer(show_task)
    except PaymentUiError as e:
      message = f"Could not charge user. {e}"
      self.report(message)
      return CheckoutResult(ResponseStatus.FAIL, message)
    finally:
      if not show_task.done():
        show_task.cancel()

    if response.method_name != ANDROID_PAY_METHOD:
      return await self._simulate_credit_card_processing(response)
    return await self._authorize(response)

  async def _wait_for_payer(
      self, show_task: "asyncio.Future[PaymentResponse]"
  ) -> PaymentResponse:
    done, _ = await asyncio.wait({show_task}, timeout=self.session_timeout)
    if done:
      return show_task.result()

    try:
      await self.ui.abort()
    except PaymentUiError:
      # The payer is approving the payment; let them finish.
      self.report(
          "Unable to abort, because the user is currently in the process of"
          " paying."
      )
      return await show_task

    self.report(
        f"Payment timed out after {self.session_timeout / 60:g} minutes."
    )
    if not show_task.done():
      show_task.cancel()
    await asyncio.wait({show_task})
    if show_task.cancelled():
      raise PaymentAbortedError("The payment request was aborted.")
    return show_task.result()

  async def _authorize(self, response: PaymentResponse) -> CheckoutResult:
    instrument = instrument_to_dict(response)
    instrument["total"] = self.details.total.model_dump(
        mode="json", by_alias=True
    )

    try:
      buy_result = await self.client.post("/buy", json=instrument)
    except httpx.HTTPError as e:
      logger.error("Failed to send instrument to server: %s", e)
      return await self._complete(
          response, ResponseStatus.FAIL, "Error sending instrument to server."
      )

    if not buy_result.is_success:
      return await self._complete(
          response, ResponseStatus.FAIL, "Error sending instrument to server."
      )

    try:
      envelope = buy_result.json()
      status = ResponseStatus(envelope.get("status"))
      message = envelope.get("message") or ""
    except (ValueError, AttributeError):
      return await self._complete(
          response, ResponseStatus.FAIL, "Error sending instrument to server."
      )
    return await self._complete(response, status, message)

  async def _simulate_credit_card_processing(
      self, response: PaymentResponse
  ) -> CheckoutResult:
    """Pretends to process a card payment without talking to the server."""
    await asyncio.sleep(self.simulation_delay)
    return await self._complete(
        response,
        ResponseStatus.SUCCESS,
        "Simulated credit card authorization",
        summary=json.dumps(instrument_to_dict(response), indent=2),
    )

  async def _complete(
      self,
      response: PaymentResponse,
      status: ResponseStatus,
      message: str,
      summary: Optional[str] = None,
  ) -> CheckoutResult:
    try:
      await self.ui.complete(response, status)
    except PaymentUiError as e:
      self.report(str(e))
      return CheckoutResult(ResponseStatus.FAIL, str(e))

    if summary:
      self.report(summary)
    self.report(message)
    return CheckoutResult(status, message)
