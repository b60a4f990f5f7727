"""Material definitions carried alongside mesh geometry."""

from dataclasses import dataclass


@dataclass
class Material:
    """Surface appearance properties (no renderer state)."""
    color: tuple[float, float, float] = (0.8, 0.8, 0.8)
    opacity: float = 1.0
    shininess: float = 30.0
    texture: str = ""  # label of the albedo map, resolved by the host
