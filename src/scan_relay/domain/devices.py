"""Domain models for devices and collaborators' records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CameraDevice:
    """A camera as enumerated by the platform."""

    id: str
    label: str


@dataclass(frozen=True)
class Product:
    """Minimal view of a product returned by the catalog lookup."""

    id: str
    name: str
    stock: int | None = None
