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

"""Integration tests for the Web Payments demo server."""

import json
import os
import shutil
import tempfile
from typing import Any, Dict, List, Optional

from absl.testing import absltest
import config
import dependencies
from exceptions import ProviderError
from fastapi.testclient import TestClient
from models import ChargeConfirmation
from models import ChargeRequest
from models import RateQuote
from models import RateRequest
from server import app
from server import create_app
from services.payment_processor import PaymentProcessor
from services.rate_provider import RateProvider


class FakeRateProvider(RateProvider):
  """Rate provider returning canned quotes."""

  def __init__(self):
    self.quotes: List[RateQuote] = []
    self.error: Optional[ProviderError] = None
    self.requests: List[RateRequest] = []

  async def quote(self, request: RateRequest) -> List[RateQuote]:
    self.requests.append(request)
    if self.error:
      raise self.error
    return self.quotes


class FakePaymentProcessor(PaymentProcessor):
  """Payment processor recording charges."""

  def __init__(self):
    self.error: Optional[ProviderError] = None
    self.charges: List[ChargeRequest] = []

  async def authorize(self, request: ChargeRequest) -> ChargeConfirmation:
    self.charges.append(request)
    if self.error:
      raise self.error
    return ChargeConfirmation(id="ch_1", status="succeeded")


class IntegrationTest(absltest.TestCase):
  """Integration tests for the server application."""

  def setUp(self) -> None:
    """Sets up fake providers and the test client."""
    super().setUp()
    self.rate_provider = FakeRateProvider()
    self.payment_processor = FakePaymentProcessor()
    self.settings = config.Settings(manifest_url="https://pay.test/manifest")

    app.dependency_overrides[dependencies.get_settings] = lambda: self.settings
    app.dependency_overrides[dependencies.get_rate_provider] = (
        lambda: self.rate_provider
    )
    app.dependency_overrides[dependencies.get_payment_processor] = (
        lambda: self.payment_processor
    )

    self.client = TestClient(app)

  def tearDown(self) -> None:
    """Clears the dependency overrides."""
    app.dependency_overrides.clear()
    super().tearDown()

  def _address_payload(self, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "recipient": "Sherlock Holmes",
        "organization": "",
        "addressLine": ["221B Baker St"],
        "dependentLocality": "Flat 2",
        "city": "London",
        "region": "",
        "postalCode": "",
        "sortingCode": "NW16XE",
        "country": "GB",
        "phone": "+44 20 7224 3688",
    }
    payload.update(overrides)
    return payload

  def _buy_payload(self, method_name: str = "https://android.com/pay"):
    return {
        "methodName": method_name,
        "details": {
            "paymentMethodToken": json.dumps(
                {"id": "tok_visa", "object": "token"}
            )
        },
        "shippingAddress": self._address_payload(),
        "shippingOption": "rate_2",
        "payerName": "Sherlock Holmes",
        "total": {
            "label": "Total",
            "amount": {"currency": "USD", "value": "8.50"},
        },
    }

  def test_ship_selects_cheapest_option(self) -> None:
    """Tests that shipping options come back with the cheapest selected."""
    self.rate_provider.quotes = [
        RateQuote(
            object_id=f"rate_{i}",
            provider="Royal Mail",
            servicelevel_name=name,
            currency="GBP",
            amount=amount,
        )
        for i, (name, amount) in enumerate(
            [("Special", "12.50"), ("1st Class", "8.00"), ("2nd", "8.00")],
            start=1,
        )
    ]

    response = self.client.post("/ship", json=self._address_payload())

    self.assertEqual(response.status_code, 200, f"Response: {response.text}")
    self.assertEqual(
        response.json(),
        {
            "status": "success",
            "message": "Calculated shipping options",
            "shippingOptions": [
                {
                    "id": "rate_1",
                    "label": "Royal Mail Special",
                    "amount": {"currency": "GBP", "value": "12.50"},
                    "selected": False,
                },
                {
                    "id": "rate_2",
                    "label": "Royal Mail 1st Class",
                    "amount": {"currency": "GBP", "value": "8.00"},
                    "selected": True,
                },
                {
                    "id": "rate_3",
                    "label": "Royal Mail 2nd",
                    "amount": {"currency": "GBP", "value": "8.00"},
                    "selected": False,
                },
            ],
        },
    )
    address_to = self.rate_provider.requests[0].address_to
    self.assertEqual(address_to.street1, "221B Baker St")
    self.assertEqual(address_to.street2, "Flat 2")
    self.assertEqual(address_to.zip, "NW16XE")

  def test_ship_without_rates(self) -> None:
    """Tests that an empty rate list yields no shipping options."""
    response = self.client.post("/ship", json=self._address_payload())
    self.assertEqual(response.status_code, 200)
    self.assertEqual(response.json()["status"], "success")
    self.assertEqual(response.json()["shippingOptions"], [])

  def test_ship_provider_error(self) -> None:
    """Tests that provider failures still answer HTTP 200."""
    self.rate_provider.error = ProviderError("Shippo is down")

    response = self.client.post("/ship", json=self._address_payload())

    self.assertEqual(response.status_code, 200)
    self.assertEqual(
        response.json(),
        {"status": "fail", "message": "Error calculating shipping options"},
    )

  def test_ship_accepts_partial_address(self) -> None:
    """Tests that missing address fields default to empty strings."""
    response = self.client.post("/ship", json={"country": "US"})
    self.assertEqual(response.status_code, 200)
    address_to = self.rate_provider.requests[0].address_to
    self.assertEqual(address_to.country, "US")
    self.assertEqual(address_to.street1, "")

  def test_ship_malformed_body(self) -> None:
    """Tests that a body that is not JSON is rejected by validation."""
    response = self.client.post(
        "/ship",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    self.assertEqual(response.status_code, 422)

  def test_buy_success(self) -> None:
    """Tests a successful authorization."""
    response = self.client.post("/buy", json=self._buy_payload())

    self.assertEqual(response.status_code, 200)
    self.assertEqual(
        response.json(), {"status": "success", "message": "Payment authorized"}
    )
    self.assertLen(self.payment_processor.charges, 1)
    charge = self.payment_processor.charges[0]
    self.assertEqual(charge.source, "tok_visa")
    self.assertEqual(charge.amount, 50)
    self.assertFalse(charge.capture)

  def test_buy_unsupported_method(self) -> None:
    """Tests that other payment methods are rejected without a charge."""
    response = self.client.post(
        "/buy", json=self._buy_payload(method_name="basic-card")
    )

    self.assertEqual(response.status_code, 200)
    self.assertEqual(
        response.json(), {"status": "fail", "message": "Invalid request"}
    )
    self.assertEmpty(self.payment_processor.charges)

  def test_buy_without_body(self) -> None:
    """Tests that an empty request is rejected without a charge."""
    response = self.client.post("/buy")

    self.assertEqual(response.status_code, 200)
    self.assertEqual(response.json()["status"], "fail")
    self.assertEmpty(self.payment_processor.charges)

  def test_buy_processor_error(self) -> None:
    """Tests that processor failures are reported as invalid requests."""
    self.payment_processor.error = ProviderError("Your card was declined.")

    response = self.client.post("/buy", json=self._buy_payload())

    self.assertEqual(response.status_code, 200)
    self.assertEqual(
        response.json(), {"status": "fail", "message": "Invalid request"}
    )

  def test_manifest_probe(self) -> None:
    """Tests the payment method manifest link header."""
    response = self.client.head("/test")

    self.assertEqual(response.status_code, 200)
    self.assertEqual(
        response.headers["link"],
        '<https://pay.test/manifest>; rel="payment-method-manifest"',
    )
    self.assertEqual(response.content, b"")


class StaticFilesTest(absltest.TestCase):
  """Tests for serving the checkout page."""

  def setUp(self) -> None:
    super().setUp()
    self.test_dir = tempfile.mkdtemp()
    with open(
        os.path.join(self.test_dir, "index.html"), "w", encoding="utf-8"
    ) as f:
      f.write("<h1>Checkout</h1>")

  def tearDown(self) -> None:
    shutil.rmtree(self.test_dir)
    super().tearDown()

  def test_serves_index(self) -> None:
    client = TestClient(create_app(self.test_dir))
    response = client.get("/")
    self.assertEqual(response.status_code, 200)
    self.assertIn("Checkout", response.text)

  def test_api_routes_take_precedence(self) -> None:
    client = TestClient(create_app(self.test_dir))
    response = client.head("/test")
    self.assertEqual(response.status_code, 200)
    self.assertIn("payment-method-manifest", response.headers["link"])

  def test_missing_static_dir(self) -> None:
    client = TestClient(create_app(os.path.join(self.test_dir, "missing")))
    self.assertEqual(client.get("/").status_code, 404)


if __name__ == "__main__":
  absltest.main()
