"""Coordinate frames as handles into a registry.

A ``Frame`` carries no geometry. It only names a coordinate frame, so that
transforms and spatial vectors can refuse to combine quantities expressed in
different frames. Frames are issued by a ``FrameRegistry`` (an arena) and
compared by handle: two frames are equal exactly when they were issued by
the same registry under the same index. Names are for display only and never
take part in comparison.

Handles are immutable and hashable, which lets them ride along as static
metadata in JAX pytrees.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Iterator, List

logger = logging.getLogger(__name__)

_registry_ids = itertools.count()


@dataclass(frozen=True)
class Frame:
    """Identity-only handle for a coordinate frame."""
    registry_id: int
    index: int
    name: str = field(default="", compare=False)

    def __str__(self):
        return self.name or f"frame#{self.index}"

    def __repr__(self):
        return f"Frame({self.name!r}, registry={self.registry_id}, index={self.index})"


class FrameRegistry:
    """Arena that issues frame handles.

    Index 0 is always the ``world`` frame.

    Example:
        >>> registry = FrameRegistry()
        >>> link = registry.create("upper_arm")
        >>> link == registry.create("upper_arm")
        False
    """

    def __init__(self, world_name: str = "world"):
        self._id = next(_registry_ids)
        self._names: List[str] = []
        self.world = self.create(world_name)

    def create(self, name: str = "") -> Frame:
        """Issue a new frame, distinct from every frame issued before."""
        index = len(self._names)
        self._names.append(name)
        frame = Frame(self._id, index, name)
        logger.debug("Created frame %r", frame)
        return frame

    def name(self, frame: Frame) -> str:
        if frame not in self:
            raise KeyError(f"{frame!r} was not issued by this registry")
        return self._names[frame.index]

    def __contains__(self, frame) -> bool:
        return (isinstance(frame, Frame)
                and frame.registry_id == self._id
                and 0 <= frame.index < len(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[Frame]:
        for index, name in enumerate(self._names):
            yield Frame(self._id, index, name)

    def __repr__(self):
        return f"FrameRegistry(id={self._id}, frames={len(self)})"
