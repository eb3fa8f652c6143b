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

"""Folds Payment Request addresses into the rate provider's address format.

The Payment Request API reports an international address as a list of address
lines plus a dependent locality and a sorting code. The rate provider only
accepts two street lines and one postal code.
"""

from models import NormalizedAddress
from models import PaymentAddress


def normalize_address(address: PaymentAddress) -> NormalizedAddress:
  """Folds an address into street1, street2 and a single postal code.

  The dependent locality becomes the last address line. A sorting code is
  appended as an address line when a postal code is present, otherwise it
  takes the place of the postal code.

  Args:
    address: The address reported by the payment UI. It is not modified.

  Returns:
    The normalized address.
  """
  address_lines = list(address.address_line)
  if address.dependent_locality:
    address_lines.append(address.dependent_locality)

  postal_code = address.postal_code
  if address.sorting_code:
    if postal_code:
      address_lines.append(address.sorting_code)
    else:
      postal_code = address.sorting_code

  street1 = address_lines[0] if address_lines else ""
  street2 = ", ".join(address_lines[1:])

  return NormalizedAddress(
      street1=street1, street2=street2, postal_code=postal_code
  )
