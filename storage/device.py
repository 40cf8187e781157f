"""Device identity and per-device axis configuration"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Dict

LOG = logging.getLogger("joymapper.device")


@dataclass(frozen=True)
class DeviceInfo:
    """Static description of a joystick as reported by its driver.

    Two descriptions are the same device when every field matches.
    """
    name: str = ""
    provider: str = ""
    vendor_id: int = 0
    product_id: int = 0
    button_count: int = 0
    hat_count: int = 0
    axis_count: int = 0
    index: int = 0

    @property
    def is_valid(self) -> bool:
        return bool(self.name) and bool(self.provider)

    @classmethod
    def from_dict(cls, data: dict) -> "DeviceInfo":
        return cls(
            name=str(data.get("name", "")),
            provider=str(data.get("provider", "")),
            vendor_id=int(data.get("vendor_id", 0)),
            product_id=int(data.get("product_id", 0)),
            button_count=int(data.get("button_count", 0)),
            hat_count=int(data.get("hat_count", 0)),
            axis_count=int(data.get("axis_count", 0)),
            index=int(data.get("index", 0)),
        )


@dataclass
class AxisConfiguration:
    center: int = 0
    range: int = 1
    trigger: bool = False  # axis rests at one end instead of the middle


@dataclass
class DeviceConfiguration:
    axes: Dict[int, AxisConfiguration] = field(default_factory=dict)

    def axis(self, index: int) -> AxisConfiguration:
        return self.axes.get(index, AxisConfiguration())

    def load_axis(self, device: "Device", index: int):
        """Make sure an axis touched by a new mapping has a configuration entry."""
        if index not in self.axes:
            self.axes[index] = AxisConfiguration()
            LOG.debug("%s: added configuration for axis %d", device.info.name, index)


@dataclass
class Device:
    info: DeviceInfo = field(default_factory=DeviceInfo)
    configuration: DeviceConfiguration = field(default_factory=DeviceConfiguration)

    @property
    def is_valid(self) -> bool:
        return self.info.is_valid

    def copy_configuration_from(self, other: "Device"):
        self.configuration = copy.deepcopy(other.configuration)
