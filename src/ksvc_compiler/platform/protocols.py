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

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ksvc_compiler.models.descriptor import KnativeServiceDescriptor


@runtime_checkable
class Defaulter(Protocol):
    """Fill in the values the platform's defaulting webhook would add.

    Applying the platform defaults before the descriptor is submitted keeps
    later reconciliation passes from reporting meaningless diffs.
    Implementations must not mutate their argument.
    """

    def apply(self, descriptor: KnativeServiceDescriptor) -> KnativeServiceDescriptor: ...


@dataclass
class RouteRequest:
    payload: Any
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class RouteResponse:
    """One response produced by the router's fan-out.

    Attributes
    ----------
    status_code: int
        Transport status reported by the backend (HTTP or gRPC code).
    payload: Any
        Response body. For failed responses, the error text as bytes or str.
    metadata: dict[str, str]
        Headers / trailers to hand back to the original caller.
    success: bool
        Whether the backend considered the call successful.
    """

    status_code: int
    payload: Any
    metadata: dict[str, str] = field(default_factory=dict)
    success: bool = True


@runtime_checkable
class Router(Protocol):
    """Distributes one inbound prediction request across candidate backends.

    ``dispatch`` yields the reassembled responses; an exhausted iterator with
    no items means the router gave up without an answer.
    """

    def dispatch(self, request: RouteRequest) -> Iterator[RouteResponse]: ...
