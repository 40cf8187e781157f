"""Feature and primitive models shared by the button map store and the transformer"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List


class PrimitiveType(Enum):
    UNKNOWN = "unknown"
    BUTTON = "button"
    HAT = "hat"
    SEMIAXIS = "semiaxis"
    MOTOR = "motor"
    KEY = "key"


class FeatureType(Enum):
    UNKNOWN = "unknown"
    SCALAR = "scalar"
    ANALOG_STICK = "analogstick"
    ACCELEROMETER = "accelerometer"
    MOTOR = "motor"
    RELPOINTER = "relpointer"
    WHEEL = "wheel"
    THROTTLE = "throttle"
    KEY = "key"


# Primitive slots, by feature type
SCALAR_PRIMITIVE = 0

ANALOG_STICK_UP = 0
ANALOG_STICK_DOWN = 1
ANALOG_STICK_RIGHT = 2
ANALOG_STICK_LEFT = 3

ACCELEROMETER_POSITIVE_X = 0
ACCELEROMETER_POSITIVE_Y = 1
ACCELEROMETER_POSITIVE_Z = 2

WHEEL_LEFT = 0
WHEEL_RIGHT = 1

THROTTLE_UP = 0
THROTTLE_DOWN = 1

SLOT_COUNT = {
    FeatureType.UNKNOWN: 0,
    FeatureType.SCALAR: 1,
    FeatureType.MOTOR: 1,
    FeatureType.KEY: 1,
    FeatureType.ANALOG_STICK: 4,
    FeatureType.RELPOINTER: 4,
    FeatureType.ACCELEROMETER: 3,
    FeatureType.WHEEL: 2,
    FeatureType.THROTTLE: 2,
}

HAT_DIRECTIONS = ("up", "down", "right", "left")


@dataclass(frozen=True)
class DriverPrimitive:
    """Reference to one physical input element of a device.

    Only the fields relevant to ``type`` are meaningful; the others keep
    their defaults so that dataclass equality compares identifying fields.
    """
    type: PrimitiveType = PrimitiveType.UNKNOWN
    driver_index: int = 0
    hat_direction: str = ""  # one of HAT_DIRECTIONS
    center: int = 0  # semiaxis resting point
    semiaxis_direction: int = 0  # +1 or -1
    range: int = 1  # semiaxis range from center
    keycode: str = ""

    @classmethod
    def button(cls, index: int) -> "DriverPrimitive":
        return cls(PrimitiveType.BUTTON, driver_index=index)

    @classmethod
    def hat(cls, index: int, direction: str) -> "DriverPrimitive":
        if direction not in HAT_DIRECTIONS:
            raise ValueError(f"invalid hat direction: {direction!r}")
        return cls(PrimitiveType.HAT, driver_index=index, hat_direction=direction)

    @classmethod
    def semiaxis(cls, index: int, direction: int, center: int = 0, range: int = 1) -> "DriverPrimitive":
        if direction not in (1, -1):
            raise ValueError(f"invalid semiaxis direction: {direction!r}")
        return cls(PrimitiveType.SEMIAXIS, driver_index=index, center=center,
                   semiaxis_direction=direction, range=range)

    @classmethod
    def motor(cls, index: int) -> "DriverPrimitive":
        return cls(PrimitiveType.MOTOR, driver_index=index)

    @classmethod
    def key(cls, keycode: str) -> "DriverPrimitive":
        return cls(PrimitiveType.KEY, keycode=keycode)

    @property
    def is_valid(self) -> bool:
        return self.type != PrimitiveType.UNKNOWN

    def __str__(self):
        if self.type == PrimitiveType.BUTTON:
            return f"button {self.driver_index}"
        if self.type == PrimitiveType.HAT:
            return f"hat {self.driver_index} {self.hat_direction}"
        if self.type == PrimitiveType.SEMIAXIS:
            sign = "+" if self.semiaxis_direction > 0 else "-"
            return f"axis {sign}{self.driver_index}"
        if self.type == PrimitiveType.MOTOR:
            return f"motor {self.driver_index}"
        if self.type == PrimitiveType.KEY:
            return f"key {self.keycode}"
        return "unknown"

    def to_dict(self) -> dict:
        if self.type == PrimitiveType.BUTTON:
            return {"type": "button", "index": self.driver_index}
        if self.type == PrimitiveType.HAT:
            return {"type": "hat", "index": self.driver_index, "direction": self.hat_direction}
        if self.type == PrimitiveType.SEMIAXIS:
            return {"type": "semiaxis", "index": self.driver_index, "direction": self.semiaxis_direction,
                    "center": self.center, "range": self.range}
        if self.type == PrimitiveType.MOTOR:
            return {"type": "motor", "index": self.driver_index}
        if self.type == PrimitiveType.KEY:
            return {"type": "key", "keycode": self.keycode}
        return {"type": "unknown"}

    @classmethod
    def from_dict(cls, data: dict) -> "DriverPrimitive":
        if data is None:
            return cls()
        ptype = PrimitiveType(data.get("type", "unknown"))
        if ptype == PrimitiveType.BUTTON:
            return cls.button(int(data["index"]))
        if ptype == PrimitiveType.HAT:
            return cls.hat(int(data["index"]), data["direction"])
        if ptype == PrimitiveType.SEMIAXIS:
            return cls.semiaxis(int(data["index"]), int(data["direction"]),
                                int(data.get("center", 0)), int(data.get("range", 1)))
        if ptype == PrimitiveType.MOTOR:
            return cls.motor(int(data["index"]))
        if ptype == PrimitiveType.KEY:
            return cls.key(str(data["keycode"]))
        return cls()


@dataclass
class Feature:
    name: str
    type: FeatureType = FeatureType.UNKNOWN
    primitives: List[DriverPrimitive] = field(default_factory=list)

    def __post_init__(self):
        slots = SLOT_COUNT[self.type]
        if len(self.primitives) > slots:
            raise ValueError(f"feature {self.name!r} of type {self.type.value} takes at most {slots} primitives")
        self.primitives = list(self.primitives) + [DriverPrimitive()] * (slots - len(self.primitives))

    def primitive(self, slot: int) -> DriverPrimitive:
        return self.primitives[slot]

    def set_primitive(self, slot: int, primitive: DriverPrimitive):
        self.primitives[slot] = primitive

    def copy(self, name: str = None) -> "Feature":
        """Return an independent copy, optionally renamed."""
        return replace(self, name=self.name if name is None else name, primitives=list(self.primitives))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type.value,
            "primitives": [p.to_dict() for p in self.primitives],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Feature":
        return cls(
            name=str(data["name"]),
            type=FeatureType(data.get("type", "unknown")),
            primitives=[DriverPrimitive.from_dict(p) for p in data.get("primitives", [])],
        )


# controller id -> features sorted by name
ButtonMapData = Dict[str, List[Feature]]


def sort_features(features: List[Feature]):
    features.sort(key=lambda f: f.name)


def features_from_list(items) -> List[Feature]:
    return [Feature.from_dict(item) for item in items or []]


def button_map_from_dict(data: dict) -> ButtonMapData:
    return {str(controller_id): features_from_list(items) for controller_id, items in (data or {}).items()}


def button_map_to_dict(button_map: ButtonMapData) -> dict:
    return {controller_id: [f.to_dict() for f in features] for controller_id, features in button_map.items()}
