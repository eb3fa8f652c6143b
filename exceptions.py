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

"""Custom exceptions for the Web Payments demo server.

Errors raised by the checkout services carry the public message that ends up
in the response envelope. The envelope contract answers with HTTP 200 even on
failure, so the envelope errors default to that status code.
"""


class CheckoutError(Exception):
  """Base class for all checkout exceptions."""

  def __init__(
      self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500
  ):
    self.message = message
    self.code = code
    self.status_code = status_code
    super().__init__(self.message)


class InvalidRequestError(CheckoutError):
  """Raised when a payment request is rejected (validation or processor)."""

  def __init__(self, message: str = "Invalid request"):
    super().__init__(message, code="INVALID_REQUEST", status_code=200)


class ShippingCalculationError(CheckoutError):
  """Raised when shipping options cannot be calculated."""

  def __init__(self, message: str = "Error calculating shipping options"):
    super().__init__(message, code="SHIPPING_FAILED", status_code=200)


class ProviderError(CheckoutError):
  """Raised when a third-party provider call fails."""

  def __init__(
      self, message: str, code: str = "PROVIDER_ERROR", status_code: int = 502
  ):
    super().__init__(message, code=code, status_code=status_code)


class ProviderTimeoutError(ProviderError):
  """Raised when a third-party provider does not answer in time."""

  def __init__(self, message: str):
    super().__init__(message, code="PROVIDER_TIMEOUT", status_code=504)
