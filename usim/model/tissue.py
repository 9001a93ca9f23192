"""
Tissue property table.

Static reference data for every tissue kind the simulator knows about. The
table is built once at import and exposed read-only; every lookup is total over
``TissueKind``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Union

from usim.errors import InvalidConfiguration


# Unit conversion helpers (SI)
def cm(value: float) -> float:
    """Convert centimeters to meters (SI units)."""
    return value * 1e-2


def mm(value: float) -> float:
    """Convert millimeters to meters (SI units)."""
    return value * 1e-3


def MHz(value: float) -> float:
    """Convert megahertz to hertz."""
    return value * 1e6


def us(value: float) -> float:
    """Convert microseconds to seconds."""
    return value * 1e-6


class TissueKind(str, Enum):
    SKIN = "Skin"
    FAT = "Fat"
    MUSCLE = "Muscle"
    BONE = "Bone"
    BLOOD = "Blood"
    LIVER = "Liver"
    BRAIN = "Brain"
    OTHER = "Other"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "TissueKind"]) -> "TissueKind":
        """
        Resolve a tissue kind from an enum member or a name such as ``"Skin"``, ``"skin"`` or ``"SKIN"``.

        :param value: TissueKind or its (case-insensitive) name
        :raises InvalidConfiguration: if the name matches no tissue kind
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for kind in cls:
                if kind.value.lower() == key:
                    return kind
        raise InvalidConfiguration(f"Unknown tissue kind: {value!r}. "
                                   f"Expected one of {[k.value for k in cls]}")


@dataclass(frozen=True)
class TissueProperties:
    """
    Acoustic properties of a single tissue kind.

    :param speed: Propagation speed of sound in m/s
    :param attenuation: Attenuation coefficient in dB/cm/MHz
    :param density: Density in kg/m^3
    :param color: Display color (hex string), only meaningful to renderers
    :param default_thickness: Thickness in cm used when a layer of this kind is added
    """
    speed: float
    attenuation: float
    density: float
    color: str
    default_thickness: float

    @property
    def impedance(self) -> float:
        """Characteristic acoustic impedance Z = density * speed, in kg/(m^2 s)."""
        return self.speed * self.density


TISSUE_TABLE: Mapping[TissueKind, TissueProperties] = MappingProxyType({
    TissueKind.SKIN: TissueProperties(speed=1540.0, attenuation=0.8, density=1100.0,
                                      color="#ffd6a5", default_thickness=0.3),
    TissueKind.FAT: TissueProperties(speed=1450.0, attenuation=0.6, density=920.0,
                                     color="#ffee93", default_thickness=2.0),
    TissueKind.MUSCLE: TissueProperties(speed=1580.0, attenuation=1.2, density=1050.0,
                                        color="#ff9b9b", default_thickness=3.0),
    TissueKind.BONE: TissueProperties(speed=4080.0, attenuation=10.0, density=1900.0,
                                      color="#ffffff", default_thickness=1.5),
    TissueKind.BLOOD: TissueProperties(speed=1570.0, attenuation=0.2, density=1060.0,
                                       color="#ff6b6b", default_thickness=1.0),
    TissueKind.LIVER: TissueProperties(speed=1550.0, attenuation=0.9, density=1060.0,
                                       color="#9c5518", default_thickness=5.0),
    TissueKind.BRAIN: TissueProperties(speed=1560.0, attenuation=0.85, density=1040.0,
                                       color="#e6bccd", default_thickness=4.0),
    TissueKind.OTHER: TissueProperties(speed=1540.0, attenuation=1.0, density=1050.0,
                                       color="#b8c4d9", default_thickness=2.0),
})


def get_tissue_properties(kind: Union[TissueKind, str]) -> TissueProperties:
    """Look up the static properties of a tissue kind (enum member or name)."""
    return TISSUE_TABLE[TissueKind.parse(kind)]


def impedance(kind: Union[TissueKind, str]) -> float:
    """Acoustic impedance of a tissue kind in kg/(m^2 s)."""
    return get_tissue_properties(kind).impedance


def list_tissues() -> List[TissueKind]:
    """All tissue kinds in table order."""
    return list(TISSUE_TABLE.keys())
