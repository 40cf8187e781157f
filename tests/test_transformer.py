import logging

from buttonmapper.transformer import ControllerTransformer, ControllerTranslation
from core.features import DriverPrimitive as P
from core.features import Feature, FeatureType
from storage.device import AxisConfiguration, Device, DeviceInfo


def button(name, index):
    return Feature(name, FeatureType.SCALAR, [P.button(index)])


def device(n):
    return Device(DeviceInfo(name=f"pad {n}", provider="linux", index=n))


def test_canonical_key_orders_controllers():
    assert ControllerTranslation.canonical("B", "A") == ControllerTranslation("A", "B")
    assert ControllerTranslation.canonical("A", "B") == ControllerTranslation("A", "B")


def test_transform_both_directions():
    t = ControllerTransformer()
    t.on_add(device(1), {
        "A": [button("f1", 0), button("f2", 1)],
        "B": [button("g1", 0)],
    })

    forward = t.transform_features(DeviceInfo(), "A", "B", [button("f1", 7)])
    backward = t.transform_features(DeviceInfo(), "B", "A", [button("g1", 7)])

    assert [f.name for f in forward] == ["g1"]
    assert [f.name for f in backward] == ["f1"]
    assert forward[0].primitives == backward[0].primitives == [P.button(7)]


def test_transform_drops_features_without_translation():
    t = ControllerTransformer()
    t.on_add(device(1), {"A": [button("f1", 0), button("f2", 1)], "B": [button("g1", 0), button("g2", 1)]})

    result = t.transform_features(DeviceInfo(), "A", "B", [button("f2", 4), button("unrelated", 5)])
    assert [(f.name, f.primitives) for f in result] == [("g2", [P.button(4)])]


def test_transform_does_not_modify_input():
    t = ControllerTransformer()
    t.on_add(device(1), {"A": [button("f1", 0)], "B": [button("g1", 0)]})
    features = [button("f1", 3)]
    t.transform_features(DeviceInfo(), "A", "B", features)
    assert features[0].name == "f1"


def test_transform_without_observations_is_empty():
    t = ControllerTransformer()
    assert t.transform_features(DeviceInfo(), "A", "B", [button("f1", 0)]) == []
    assert t.transform_features(DeviceInfo(), "A", "A", [button("f1", 0)]) == []


def test_most_frequent_translation_wins():
    t = ControllerTransformer()
    n = 0
    for _ in range(3):
        n += 1
        t.on_add(device(n), {"A": [button("f1", 0)], "B": [button("x", 0)]})
    for _ in range(5):
        n += 1
        t.on_add(device(n), {"A": [button("f1", 0)], "B": [button("y", 0)]})

    counts = sorted(count for _, count in t.get_translations("B", "A"))
    assert counts == [3, 5]

    result = t.transform_features(DeviceInfo(), "A", "B", [button("f1", 2)])
    assert [f.name for f in result] == ["y"]


def test_equal_counts_break_ties_deterministically():
    for order in (("y", "x"), ("x", "y")):
        t = ControllerTransformer()
        for n, name in enumerate(order):
            t.on_add(device(n), {"A": [button("f1", 0)], "B": [button(name, 0)]})
        result = t.transform_features(DeviceInfo(), "A", "B", [button("f1", 2)])
        assert [f.name for f in result] == ["x"]


def test_device_is_observed_once():
    t = ControllerTransformer()
    button_map = {"A": [button("f1", 0)], "B": [button("g1", 0)]}
    assert t.on_add(device(1), button_map)
    assert not t.on_add(device(1), button_map)
    assert [count for _, count in t.get_translations("A", "B")] == [1]


def test_cap_stops_learning():
    t = ControllerTransformer()
    for n in range(200):
        assert t.on_add(device(n), {"A": [button("f1", 0)], "B": [button("g1", 0)]})
    before = t.get_translations("A", "B")

    assert not t.on_add(device(200), {"A": [button("f1", 0)], "B": [button("other", 0)]})
    assert t.observed_count == 200
    assert t.get_translations("A", "B") == before


def test_unmatched_profiles_record_nothing():
    t = ControllerTransformer()
    t.on_add(device(1), {"A": [button("f1", 0)], "B": [button("g1", 1)]})
    assert t.get_translations("A", "B") == []


def test_every_profile_pair_is_learned():
    t = ControllerTransformer()
    t.on_add(device(1), {
        "C": [button("h1", 0)],
        "A": [button("f1", 0)],
        "B": [button("g1", 0)],
    })
    assert len(t.get_translations("A", "B")) == 1
    assert len(t.get_translations("A", "C")) == 1
    assert len(t.get_translations("C", "B")) == 1


def test_create_device_copies_known_configuration():
    t = ControllerTransformer()
    known = device(1)
    known.configuration.axes[2] = AxisConfiguration(center=-1, range=2, trigger=True)
    t.on_add(known, {})

    created = t.create_device(DeviceInfo(name="pad 1", provider="linux", index=1))
    assert created.configuration.axes[2].trigger
    assert created.configuration is not known.configuration

    blank = t.create_device(DeviceInfo(name="pad 9", provider="linux"))
    assert blank.configuration.axes == {}


def test_transform_logs_candidates(caplog):
    t = ControllerTransformer()
    t.on_add(device(1), {"A": [button("f1", 0)], "B": [button("g1", 0)]})
    with caplog.at_level(logging.DEBUG, logger="joymapper.transformer"):
        t.transform_features(DeviceInfo(name="pad"), "A", "B", [button("f1", 0)])
    assert "f1 -> g1" in caplog.text
