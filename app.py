"""Entry point for joymapper

Learns controller translations from a corpus of device button maps, then
projects a feature set from one controller onto another and prints it as YAML.
"""
import argparse
import logging
import sys

import yaml

from buttonmapper.transformer import ControllerTransformer
from config import LOG_LEVELS, load_config
from core.features import button_map_from_dict, features_from_list
from storage.buttonmap import ButtonMap
from storage.device import DeviceInfo
from storage.resource import MemoryResource

LOG = logging.getLogger("joymapper")


def load_corpus(path: str, transformer: ControllerTransformer, cache_ttl_ms: int = 2000):
    """Observe every device in a corpus file. Returns the button map stores created."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    stores = []
    for i, entry in enumerate(data.get("devices", [])):
        info = DeviceInfo.from_dict(entry.get("device", {}))
        device = transformer.create_device(info)
        resource = MemoryResource(button_map_from_dict(entry.get("buttonmap", {})))
        store = ButtonMap(f"{path}#{i}", resource, device, transformer=transformer, cache_ttl_ms=cache_ttl_ms)
        if not store.refresh():
            LOG.warning("skipping device %d (%s) in %s", i, info.name, path)
            continue
        stores.append(store)

    LOG.info("observed %d devices from %s", transformer.observed_count, path)
    return stores


def main(argv=None):
    parser = argparse.ArgumentParser(description="joymapper: translate button maps between controllers")
    parser.add_argument("--corpus", required=True, help="YAML file of devices and their button maps")
    parser.add_argument("--features", required=True, help="YAML list of features to transform")
    parser.add_argument("--from", dest="from_controller", required=True, help="controller the features are mapped for")
    parser.add_argument("--to", dest="to_controller", required=True, help="controller to transform the features to")
    parser.add_argument("--device", default="", help="name of the device the features belong to")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("--log-level", default=None, choices=LOG_LEVELS,
                        help="Logging level (default: from config, else INFO)")
    parser.add_argument("--log-format", default="%(levelname)s:%(name)s:%(message)s",
                        help="Logging format string (default: %(levelname)s:%(name)s:%(message)s)")
    parser.add_argument("--debug-modules", nargs="*", default=[],
                        help="Modules to set to DEBUG level (e.g., 'transformer', 'buttonmap', 'device')")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(level=getattr(logging, args.log_level or config.log_level), format=args.log_format)

    for module in args.debug_modules:
        logging.getLogger(f"joymapper.{module}").setLevel(logging.DEBUG)

    transformer = ControllerTransformer(config.observed_device_cap)
    try:
        load_corpus(args.corpus, transformer, config.cache_ttl_ms)
        with open(args.features, "r", encoding="utf-8") as f:
            features = features_from_list(yaml.safe_load(f))
    except (OSError, yaml.YAMLError, KeyError, ValueError) as e:
        LOG.error("failed to read input: %s", e)
        return 1

    transformed = transformer.transform_features(DeviceInfo(name=args.device), args.from_controller,
                                                 args.to_controller, features)
    if not transformed:
        LOG.warning("no transformation known from %s to %s", args.from_controller, args.to_controller)

    yaml.safe_dump([f.to_dict() for f in transformed], sys.stdout, sort_keys=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
