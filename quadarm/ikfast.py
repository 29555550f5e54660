"""Solution containers for closed-form inverse kinematics solvers.

A solver reports each solution as one :class:`SingleDofSolution` per joint.
A joint either has a fixed value or follows one of the free parameters,
which the caller sets when it asks for a concrete configuration.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

IKFAST_VERSION = 0x10000048

_PI = 3.14159265358979
_TWO_PI = 6.28318530717959


@dataclass
class SingleDofSolution:
    """Solution for one joint.

    The joint value is ``fmul * free[freeind] + foffset`` when ``freeind`` is
    non-negative, and ``foffset`` otherwise. ``maxsolutions`` is ``None``
    when it was never set; an entry of ``indices`` is ``None`` when unused.
    """

    fmul: float = 0.0
    foffset: float = 0.0
    freeind: int = -1
    jointtype: int = 0
    maxsolutions: int | None = 1
    indices: tuple[int | None, ...] = field(default=(None,) * 5)


class IkSolution:
    """One solution of a kinematic chain, possibly with free parameters."""

    def __init__(
        self, infos: Sequence[SingleDofSolution], free: Sequence[int] = ()
    ) -> None:
        self.infos = list(infos)
        self.free = list(free)

    def solution(self, free_values: Sequence[float] = ()) -> list[float]:
        """Concrete joint values for the given free parameter values.

        Joints driven by a free parameter are wrapped into ``[-pi, pi]``.
        """
        values = []
        for info in self.infos:
            if info.freeind < 0:
                values.append(info.foffset)
                continue
            value = free_values[info.freeind] * info.fmul + info.foffset
            if value > _PI:
                value -= _TWO_PI
            elif value < -_PI:
                value += _TWO_PI
            values.append(value)
        return values

    def dof(self) -> int:
        """Number of joints in the solution."""
        return len(self.infos)

    def validate(self) -> None:
        """Raise ``ValueError`` if any joint entry is inconsistent."""
        for info in self.infos:
            if info.maxsolutions is None:
                raise ValueError("max solutions for joint not initialized")
            if info.maxsolutions > 0:
                first, second = info.indices[0], info.indices[1]
                if first is None or first >= info.maxsolutions:
                    raise ValueError("index >= max solutions for joint")
                if second is not None and second >= info.maxsolutions:
                    raise ValueError("2nd index >= max solutions for joint")
            if not math.isfinite(info.foffset):
                raise ValueError("foffset was not finite")

    def solution_indices(self) -> list[int]:
        """Unique indices identifying which branches produced this solution."""
        indices = [0]
        for info in reversed(self.infos):
            if info.maxsolutions is None or info.maxsolutions <= 1:
                continue
            indices = [value * info.maxsolutions for value in indices]
            original = list(indices)
            if info.indices[1] is not None:
                indices.extend(value + info.indices[1] for value in original)
            if info.indices[0] is not None:
                offset = info.indices[0]
                indices[: len(original)] = [value + offset for value in original]
        return indices


class IkSolutionList:
    """Ordered collection of :class:`IkSolution` objects."""

    def __init__(self) -> None:
        self._solutions: list[IkSolution] = []

    def add(self, infos: Sequence[SingleDofSolution], free: Sequence[int] = ()) -> int:
        """Store a new solution and return its index."""
        self._solutions.append(IkSolution(infos, free))
        return len(self._solutions) - 1

    def __getitem__(self, index: int) -> IkSolution:
        if not 0 <= index < len(self._solutions):
            raise IndexError("GetSolution index is invalid")
        return self._solutions[index]

    def __len__(self) -> int:
        return len(self._solutions)

    def __iter__(self) -> Iterator[IkSolution]:
        return iter(self._solutions)

    def clear(self) -> None:
        """Remove every stored solution."""
        self._solutions.clear()