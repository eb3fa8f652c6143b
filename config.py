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

"""Shared configuration for the Web Payments demo server.

Deployment constants (the origin address, the parcel and the charge
parameters) live in `Settings`, which is built once from the command-line
flags and handed to the services through FastAPI dependencies.
"""

import os
import pathlib

from absl import flags
from models import Parcel
from models import ShippingContact
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

FLAGS = flags.FLAGS

SERVER_VERSION = "1.0.0"

DEFAULT_STATIC_DIR = pathlib.Path(__file__).parent / "public"

# Define flags only if they haven't been defined yet (to avoid duplicates
# during tests or re-imports)
try:
  flags.DEFINE_string("host", "0.0.0.0", "Host to bind the server to")
  flags.DEFINE_integer("port", 8080, "Port to run the server on")
  flags.DEFINE_string(
      "shippo_api_key",
      None,
      "Shippo API token. Defaults to the SHIPPO_API_KEY environment variable.",
  )
  flags.DEFINE_string(
      "stripe_api_key",
      None,
      "Stripe secret key. Defaults to the STRIPE_API_KEY environment variable.",
  )
  flags.DEFINE_string(
      "shippo_base_url", "https://api.goshippo.com", "Shippo API base URL"
  )
  flags.DEFINE_string(
      "stripe_base_url", "https://api.stripe.com", "Stripe API base URL"
  )
  flags.DEFINE_float(
      "provider_timeout_seconds",
      10.0,
      "Timeout for calls to the shipping and payment providers",
  )
  flags.DEFINE_string(
      "manifest_url",
      "https://yanfii.github.io/test/bobpay/payment-manifest.json",
      "Payment method manifest advertised by HEAD /test",
  )
  flags.DEFINE_string(
      "static_dir",
      str(DEFAULT_STATIC_DIR),
      "Directory with the checkout page assets",
  )
except flags.DuplicateFlagError:
  pass


def _default_origin() -> ShippingContact:
  return ShippingContact(
      name="Rouslan Solomakhin",
      company="Google",
      street1="340 Main St",
      city="Los Angeles",
      state="CA",
      zip="90291",
      country="US",
      phone="310-310-6000",
      email="test.source@test.com",
  )


class ShippingSettings(BaseModel):
  """Configuration of the shipping-rate provider and fixed shipment data."""

  model_config = ConfigDict(frozen=True)

  api_key: str = ""
  base_url: str = "https://api.goshippo.com"
  origin: ShippingContact = Field(default_factory=_default_origin)
  parcel: Parcel = Field(default_factory=Parcel)
  destination_email: str = "test.destination@test.com"


class PaymentSettings(BaseModel):
  """Configuration of the card-payment processor and the demo charge."""

  model_config = ConfigDict(frozen=True)

  api_key: str = ""
  base_url: str = "https://api.stripe.com"
  method_name: str = "https://android.com/pay"
  amount: int = 50
  currency: str = "usd"
  description: str = "Web payments demo"


class Settings(BaseModel):
  """Top-level server configuration."""

  model_config = ConfigDict(frozen=True)

  shipping: ShippingSettings = Field(default_factory=ShippingSettings)
  payment: PaymentSettings = Field(default_factory=PaymentSettings)
  provider_timeout_seconds: float = 10.0
  manifest_url: str = (
      "https://yanfii.github.io/test/bobpay/payment-manifest.json"
  )
  static_dir: str = str(DEFAULT_STATIC_DIR)


def load_settings() -> Settings:
  """Builds the server settings from flags and environment variables."""
  if not FLAGS.is_parsed():
    # Running under an ASGI server or a test runner rather than absl.app;
    # flags keep their defaults.
    FLAGS.mark_as_parsed()

  return Settings(
      shipping=ShippingSettings(
          api_key=FLAGS.shippo_api_key or os.getenv("SHIPPO_API_KEY", ""),
          base_url=FLAGS.shippo_base_url,
      ),
      payment=PaymentSettings(
          api_key=FLAGS.stripe_api_key or os.getenv("STRIPE_API_KEY", ""),
          base_url=FLAGS.stripe_base_url,
      ),
      provider_timeout_seconds=FLAGS.provider_timeout_seconds,
      manifest_url=FLAGS.manifest_url,
      static_dir=FLAGS.static_dir,
  )
