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

"""FastAPI dependencies for the Web Payments demo server.

This module wires the explicit configuration into the endpoints:
- Settings loading (flags and environment).
- Provider instantiation (Shippo rates, Stripe charges).
- Service instantiation (ShippingService, PaymentService).

Tests replace `get_rate_provider` and `get_payment_processor` through
`app.dependency_overrides` to avoid live network calls.
"""

import functools

import config
from fastapi import Depends
from services.payment_processor import PaymentProcessor
from services.payment_processor import StripePaymentProcessor
from services.payment_service import PaymentService
from services.rate_provider import RateProvider
from services.rate_provider import ShippoRateProvider
from services.shipping_service import ShippingService


@functools.lru_cache(maxsize=1)
def get_settings() -> config.Settings:
  """Dependency provider for the server settings."""
  return config.load_settings()


def get_rate_provider(
    settings: config.Settings = Depends(get_settings),
) -> RateProvider:
  """Dependency provider for the shipping-rate provider."""
  return ShippoRateProvider(
      settings.shipping, timeout=settings.provider_timeout_seconds
  )


def get_payment_processor(
    settings: config.Settings = Depends(get_settings),
) -> PaymentProcessor:
  """Dependency provider for the card-payment processor."""
  return StripePaymentProcessor(
      settings.payment, timeout=settings.provider_timeout_seconds
  )


def get_shipping_service(
    settings: config.Settings = Depends(get_settings),
    rate_provider: RateProvider = Depends(get_rate_provider),
) -> ShippingService:
  """Dependency provider for ShippingService."""
  return ShippingService(settings.shipping, rate_provider)


def get_payment_service(
    settings: config.Settings = Depends(get_settings),
    processor: PaymentProcessor = Depends(get_payment_processor),
) -> PaymentService:
  """Dependency provider for PaymentService."""
  return PaymentService(settings.payment, processor)
