"""Controller transformer: learn feature translations between controller profiles

Every device whose button map covers more than one controller profile tells
us how features of one profile line up with features of another. Each such
correspondence is counted, and the most common one is used to project a
feature set onto a controller the device has never been mapped to.
"""
import logging
import threading
from itertools import combinations
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Tuple

from buttonmapper.utils import primitives_equal
from core.features import ButtonMapData, Feature, sort_features
from storage.device import Device, DeviceInfo

LOG = logging.getLogger("joymapper.transformer")

OBSERVED_DEVICE_CAP = 200


class FeatureTranslation(NamedTuple):
    from_feature: str
    to_feature: str


class ControllerTranslation(NamedTuple):
    from_controller: str
    to_controller: str

    @classmethod
    def canonical(cls, a: str, b: str) -> "ControllerTranslation":
        return cls(a, b) if a < b else cls(b, a)


FeatureMap = FrozenSet[FeatureTranslation]


class ObservedDevices:
    """Devices learned from so far. Full means full: nothing is evicted."""

    def __init__(self, cap: int = OBSERVED_DEVICE_CAP):
        self.cap = cap
        self._devices: Dict[DeviceInfo, Device] = {}

    def __len__(self):
        return len(self._devices)

    def __contains__(self, info: DeviceInfo):
        return info in self._devices

    def add(self, device: Device) -> bool:
        if len(self._devices) >= self.cap or device.info in self._devices:
            return False
        self._devices[device.info] = device
        return True

    def get(self, info: DeviceInfo) -> Optional[Device]:
        return self._devices.get(info)


class ControllerTransformer:
    def __init__(self, observed_device_cap: int = OBSERVED_DEVICE_CAP):
        self._observed = ObservedDevices(observed_device_cap)
        self._controller_map: Dict[ControllerTranslation, Dict[FeatureMap, int]] = {}
        self._lock = threading.Lock()

    @property
    def observed_count(self) -> int:
        return len(self._observed)

    def on_add(self, device: Device, button_map: ButtonMapData) -> bool:
        """Learn from a newly seen device. Returns False if the device was rejected."""
        with self._lock:
            if not self._observed.add(device):
                LOG.debug("%s: not learning from device (already observed or %d devices seen)",
                          device.info.name, len(self._observed))
                return False

            for controller_from, controller_to in combinations(sorted(button_map), 2):
                self._add_controller_map(controller_from, button_map[controller_from],
                                         controller_to, button_map[controller_to])
            return True

    def create_device(self, device_info: DeviceInfo) -> Device:
        device = Device(info=device_info)
        with self._lock:
            known = self._observed.get(device_info)
            if known is not None:
                device.copy_configuration_from(known)
        return device

    def get_translations(self, from_controller: str, to_controller: str) -> List[Tuple[FeatureMap, int]]:
        key = ControllerTranslation.canonical(from_controller, to_controller)
        with self._lock:
            return list(self._controller_map.get(key, {}).items())

    def transform_features(self, device_info: DeviceInfo, from_controller: str, to_controller: str,
                           features: List[Feature]) -> List[Feature]:
        swap = from_controller >= to_controller
        needle = ControllerTranslation.canonical(from_controller, to_controller)

        with self._lock:
            feature_maps = dict(self._controller_map.get(needle, {}))

        for feature_map, count in feature_maps.items():
            LOG.debug("Found %d controller transformations from %s to %s with %d features:",
                      count, from_controller, to_controller, len(feature_map))
            for translation in sorted(feature_map):
                LOG.debug("    %s -> %s", translation.from_feature, translation.to_feature)

        best = self._best_feature_map(feature_maps)
        if best is None:
            return []

        LOG.debug("%s: best transformation with %d translations", device_info.name, len(best))

        by_name = {feature.name: feature for feature in features}
        transformed = []
        for translation in sorted(best):
            if swap:
                from_name, to_name = translation.to_feature, translation.from_feature
            else:
                from_name, to_name = translation.from_feature, translation.to_feature

            feature = by_name.get(from_name)
            if feature is not None:
                transformed.append(feature.copy(name=to_name))

        sort_features(transformed)
        return transformed

    @staticmethod
    def _best_feature_map(feature_maps: Dict[FeatureMap, int]) -> Optional[FeatureMap]:
        # Highest count wins; equal counts go to the smallest sorted entry list
        if not feature_maps:
            return None
        return min(feature_maps, key=lambda fm: (-feature_maps[fm], sorted(fm)))

    def _add_controller_map(self, controller_from: str, features_from: List[Feature],
                            controller_to: str, features_to: List[Feature]) -> bool:
        assert controller_from < controller_to

        translations = set()
        for from_feature in features_from:
            to_feature = next((f for f in features_to if primitives_equal(from_feature, f)), None)
            if to_feature is not None:
                translations.add(FeatureTranslation(from_feature.name, to_feature.name))

        if not translations:
            return False

        key = ControllerTranslation(controller_from, controller_to)
        feature_maps = self._controller_map.setdefault(key, {})
        feature_map = frozenset(translations)
        feature_maps[feature_map] = feature_maps.get(feature_map, 0) + 1
        LOG.debug("%s -> %s: observed %d translations (seen %d times)",
                  controller_from, controller_to, len(feature_map), feature_maps[feature_map])
        return True
