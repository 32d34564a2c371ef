# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Element-wise Helpers

Small shared building blocks used by every vector and operator type so the
arithmetic is written once:

- scalar_binary_operation: combine every element with one scalar
- elementwise_unary_operation / elementwise_binary_operation
- repeatedly: fold a binary function over several operands
- at_index: row-major flat index of (row, column)
- kronecker_delta
"""

from typing import Any, Callable, List, Sequence, TypeVar

T = TypeVar("T")


def scalar_binary_operation(
    elements: Sequence[Any], value: Any, operation: Callable[[Any, Any], Any]
) -> List[Any]:
    """Apply `operation(element, value)` to every element."""
    return [operation(element, value) for element in elements]


def elementwise_unary_operation(
    elements: Sequence[Any], operation: Callable[[Any], Any]
) -> List[Any]:
    return [operation(element) for element in elements]


def elementwise_binary_operation(
    lhs: Sequence[Any], rhs: Sequence[Any], operation: Callable[[Any, Any], Any]
) -> List[Any]:
    """
    Combine two equal-length sequences element by element.

    Raises
    ------
    ValueError
        If the sequences differ in length
    """
    if len(lhs) != len(rhs):
        raise ValueError(f"Length mismatch: {len(lhs)} != {len(rhs)}")
    return [operation(a, b) for a, b in zip(lhs, rhs)]


def repeatedly(binary_function: Callable[[T, T], T], items: Sequence[T]) -> T:
    """
    Left fold of `binary_function` over at least two items.

    Examples
    --------
    >>> repeatedly(operator.add, [1, 2, 3])
    6
    """
    if len(items) < 2:
        raise ValueError("repeatedly() needs more than one item")
    output = items[0]
    for item in items[1:]:
        output = binary_function(output, item)
    return output


def at_index(row: int, column: int, n_columns: int) -> int:
    """Flat row-major index: row * n_columns + column."""
    return row * n_columns + column


def kronecker_delta(n: int, m: int) -> int:
    return 1 if n == m else 0
