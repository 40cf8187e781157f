"""Helpers for comparing features across controller profiles"""
from core.features import (
    ACCELEROMETER_POSITIVE_X,
    ACCELEROMETER_POSITIVE_Y,
    ACCELEROMETER_POSITIVE_Z,
    ANALOG_STICK_DOWN,
    ANALOG_STICK_LEFT,
    ANALOG_STICK_RIGHT,
    ANALOG_STICK_UP,
    SCALAR_PRIMITIVE,
    Feature,
    FeatureType,
)

_COMPARED_SLOTS = {
    FeatureType.SCALAR: (SCALAR_PRIMITIVE,),
    FeatureType.MOTOR: (SCALAR_PRIMITIVE,),
    FeatureType.ANALOG_STICK: (ANALOG_STICK_UP, ANALOG_STICK_DOWN, ANALOG_STICK_RIGHT, ANALOG_STICK_LEFT),
    FeatureType.ACCELEROMETER: (ACCELEROMETER_POSITIVE_X, ACCELEROMETER_POSITIVE_Y, ACCELEROMETER_POSITIVE_Z),
}


def primitives_equal(lhs: Feature, rhs: Feature) -> bool:
    """Check if two features have matching primitives.

    Features of different types never match, and neither do types with no
    defined comparison (wheels, throttles, pointers, keys).
    """
    if lhs.type != rhs.type:
        return False
    slots = _COMPARED_SLOTS.get(lhs.type)
    if slots is None:
        return False
    return all(lhs.primitive(slot) == rhs.primitive(slot) for slot in slots)
