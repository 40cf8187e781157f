"""Per-device button map with a short-lived cache, backup/revert and sanitizing"""
import copy
import logging
import threading
import time
from typing import List, Optional

from core.features import ButtonMapData, DriverPrimitive, Feature, PrimitiveType, sort_features
from storage.device import Device
from storage.resource import ButtonMapResource

LOG = logging.getLogger("joymapper.buttonmap")

RESOURCE_LIFETIME_MS = 2000


class ButtonMap:
    def __init__(self, resource_path: str, resource: ButtonMapResource, device: Optional[Device] = None,
                 transformer=None, cache_ttl_ms: int = RESOURCE_LIFETIME_MS):
        self.resource_path = resource_path
        self.device = device if device is not None else Device()
        self.cache_ttl_ms = cache_ttl_ms
        self._resource = resource
        self._transformer = transformer
        self._button_map: ButtonMapData = {}
        self._original: Optional[ButtonMapData] = None  # backup for revert, None when nothing is pending
        self._timestamp: Optional[float] = None
        self._modified = False
        self._lock = threading.RLock()
        self._subs = []
        self.subscribe(lambda device, axis: device.configuration.load_axis(device, axis))

    def subscribe(self, callback):
        """Register callback(device, axis_index), called when a mapping touches a semiaxis."""
        self._subs.append(callback)

    def is_valid(self) -> bool:
        return self.device.is_valid

    @property
    def modified(self) -> bool:
        return self._modified

    def get_button_map(self) -> ButtonMapData:
        with self._lock:
            if not self._modified:
                self.refresh()
            return self._button_map

    def get_features(self, controller_id: str) -> List[Feature]:
        """Features for one controller, derived from another profile if none are mapped."""
        button_map = self.get_button_map()
        features = button_map.get(controller_id, [])
        if features or self._transformer is None:
            return list(features)

        for other_id in sorted(button_map):
            if other_id == controller_id or not button_map[other_id]:
                continue
            transformed = self._transformer.transform_features(self.device.info, other_id, controller_id,
                                                               button_map[other_id])
            if transformed:
                LOG.debug("%s: derived %d features from %s", controller_id, len(transformed), other_id)
                return transformed
        return []

    def map_features(self, controller_id: str, features: List[Feature]):
        # Later definitions of a name replace earlier ones
        features = list({f.name: f for f in features}.values())

        with self._lock:
            # Create a backup to allow revert
            if self._original is None:
                self._original = copy.deepcopy(self._button_map)

            my_features = self._button_map.setdefault(controller_id, [])

            # Remove features with the same name
            new_names = {f.name for f in features}
            for feature in my_features:
                if feature.name in new_names:
                    LOG.debug("%s: Overwriting feature \"%s\"", controller_id, feature.name)
            my_features[:] = [f for f in my_features if f.name not in new_names]

            my_features.extend(f.copy() for f in features)

            self.sanitize(controller_id, my_features)
            sort_features(my_features)

            self._modified = True

            # Update axis configurations
            for feature in features:
                axes = {p.driver_index for p in feature.primitives if p.type == PrimitiveType.SEMIAXIS}
                for axis in sorted(axes):
                    self._emit_axis(axis)

    def save_button_map(self) -> bool:
        with self._lock:
            if not self._save():
                return False
            self._timestamp = time.monotonic()
            self._original = None
            self._modified = False
            return True

    def revert_button_map(self) -> bool:
        with self._lock:
            if self._original is None:
                return False
            self._button_map = self._original
            self._original = None
            self._modified = False
            return True

    def reset_button_map(self, controller_id: str) -> bool:
        with self._lock:
            if not self._button_map.get(controller_id):
                return False
            backup = copy.deepcopy(self._button_map)
            del self._button_map[controller_id]
            if self.save_button_map():
                return True
            self._button_map = backup
            return False

    def refresh(self) -> bool:
        with self._lock:
            now = time.monotonic()
            if self._timestamp is not None and (now - self._timestamp) * 1000.0 < self.cache_ttl_ms:
                return True

            button_map = self._load()
            if button_map is None:
                return False

            for controller_id, features in button_map.items():
                self.sanitize(controller_id, features)
                sort_features(features)

            self._button_map = button_map
            self._timestamp = now
            self._original = None
            self._modified = False

            if self._transformer is not None and self.is_valid():
                self._transformer.on_add(self.device, button_map)
            return True

    @staticmethod
    def sanitize(controller_id: str, features: List[Feature]):
        """Resolve primitive conflicts in place: the first feature to claim a primitive keeps it."""
        for i, feature in enumerate(features):
            primitives = feature.primitives
            for j, primitive in enumerate(primitives):
                if not primitive.is_valid:
                    continue

                owner = next((f for f in features[:i] if primitive in f.primitives), None)
                if owner is None and primitive in primitives[:j]:
                    owner = feature

                if owner is not None:
                    LOG.error("%s: %s of \"%s\" conflicts with \"%s\"",
                              controller_id, primitive, feature.name, owner.name)
                    primitives[j] = DriverPrimitive()

        for feature in features:
            if not any(p.is_valid for p in feature.primitives):
                LOG.debug("%s: Removing %s from button map", controller_id, feature.name)
        features[:] = [f for f in features if any(p.is_valid for p in f.primitives)]

    def _emit_axis(self, axis: int):
        for cb in self._subs:
            try:
                cb(self.device, axis)
            except Exception:
                LOG.exception("%s: axis %d subscriber failed", self.device.info.name, axis)

    def _load(self) -> Optional[ButtonMapData]:
        try:
            button_map = self._resource.load()
        except Exception:
            LOG.exception("%s: failed to load button map", self.resource_path)
            return None
        if button_map is None:
            LOG.error("%s: failed to load button map", self.resource_path)
        return button_map

    def _save(self) -> bool:
        try:
            ok = self._resource.save(self._button_map)
        except Exception:
            LOG.exception("%s: failed to save button map", self.resource_path)
            return False
        if not ok:
            LOG.error("%s: failed to save button map", self.resource_path)
        return bool(ok)
