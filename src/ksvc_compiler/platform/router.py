# Copyright 2025 Domyn
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from typing import Any

from ksvc_compiler.exceptions import RoutingError
from ksvc_compiler.helpers.logger import setup_logger
from ksvc_compiler.platform.protocols import RouteRequest, Router

logger = setup_logger(__name__, level=logging.INFO)

BAD_RESPONSE_CODE = 502


class MissionControl:
    """Submit a request to a Router and await a single response."""

    def __init__(self, router: Router):
        self.router = router

    def route(self, request: RouteRequest, context: dict[str, str] | None = None) -> Any:
        """Return the payload of the router's first response.

        Response metadata is copied into ``context`` so that it reaches the
        original caller.

        Raises:
            RoutingError: no response came back, or the response failed.
        """
        response = next(iter(self.router.dispatch(request)), None)
        if response is None:
            raise RoutingError(
                BAD_RESPONSE_CODE, "did not get back a valid response from the router"
            )

        if not response.success:
            payload = response.payload
            if isinstance(payload, bytes):
                payload = payload.decode(errors="replace")
            message = str(payload)
            logger.debug(f"Router returned an error: [{response.status_code}] {message}")
            raise RoutingError(response.status_code, message)

        if context is not None:
            context.update(response.metadata)
        return response.payload
