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

"""Payment method manifest discovery routes."""

import config
import dependencies
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Response

router = APIRouter()

MANIFEST_LINK_RELATION = "payment-method-manifest"


@router.head(
    "/test",
    operation_id="probe_payment_method_manifest",
    summary="Payment Method Manifest Probe",
)
async def probe_payment_method_manifest(
    settings: config.Settings = Depends(dependencies.get_settings),
) -> Response:
  """Points payment app verification at the payment method manifest."""
  return Response(
      status_code=200,
      headers={
          "Link": f'<{settings.manifest_url}>; rel="{MANIFEST_LINK_RELATION}"'
      },
  )
