"""Minimal rigid-link collaborator.

Joints only need one thing from the links they connect: the frame each link
is expressed in. ``RigidLink`` provides that and nothing else; any object with
a ``frame`` attribute holding a ``Frame`` works equally well.
"""

from dataclasses import dataclass

from .frames import Frame, FrameRegistry


@dataclass(frozen=True)
class RigidLink:
    name: str
    frame: Frame

    @classmethod
    def create(cls, registry: FrameRegistry, name: str) -> "RigidLink":
        """New link with its own frame issued by ``registry``."""
        return cls(name, registry.create(name))
