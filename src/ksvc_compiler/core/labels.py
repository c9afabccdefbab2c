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

from collections.abc import Iterator, Mapping


class LabelSet(Mapping[str, str]):
    """Immutable, copy-on-write set of Kubernetes labels.

    Every derivation (``with_label``, ``merged``) returns a new ``LabelSet``
    and ``to_dict`` always hands out a fresh ``dict``, so two objects built
    from the same labels never share a mutable map.
    """

    __slots__ = ("_items",)

    def __init__(self, labels: Mapping[str, str] | None = None):
        self._items: dict[str, str] = dict(labels or {})

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"LabelSet({self._items!r})"

    def with_label(self, key: str, value: str) -> "LabelSet":
        return LabelSet({**self._items, key: value})

    def merged(self, other: Mapping[str, str]) -> "LabelSet":
        """Return a new set where keys from ``other`` win on collision."""
        return LabelSet({**self._items, **other})

    def to_dict(self) -> dict[str, str]:
        return dict(self._items)
