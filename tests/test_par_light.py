import pytest

from parlight.errors import InvalidColor, InvalidMode
from parlight.models.animation import AnimationPlan
from parlight.models.fixtures import ParLight


class RecorderBus:
    def __init__(self):
        self.values = {}
        self.writes = []

    def write(self, mapping):
        self.writes.append(dict(mapping))
        self.values.update(mapping)

    def read(self, channel):
        return self.values.get(channel, 0)


class BrokenBus(RecorderBus):
    def read(self, channel):
        raise IndexError(channel)


class GarbageBus(RecorderBus):
    def read(self, channel):
        return "not a number"


class FixedReadBus(RecorderBus):
    def __init__(self, value):
        super().__init__()
        self.value = value

    def read(self, channel):
        return self.value


class FakeEngine:
    """Records run/stop calls instead of scheduling anything."""

    def __init__(self, events):
        self.events = events
        self.on_finish = None
        self.plan = None

    def run(self, plan, bus, on_finish=None):
        self.events.append(("run", self))
        self.plan = plan
        self.on_finish = on_finish
        return self

    def stop(self):
        self.events.append(("stop", self))


def make_fixture(start_channel=1):
    bus = RecorderBus()
    events = []
    fixture = ParLight(bus, start_channel, engine_factory=lambda: FakeEngine(events))
    return fixture, bus, events


def test_channel_map_follows_start_channel():
    fixture, _, _ = make_fixture(10)
    assert fixture.channels.master_dimmer == 10
    assert fixture.channels.red == 11
    assert fixture.channels.green == 12
    assert fixture.channels.blue == 13
    assert fixture.channels.strobe == 14
    assert fixture.channels.mode == 15
    assert fixture.channels.hue_speed == 16


def test_default_start_channel_and_initial_state():
    fixture, bus, _ = make_fixture()
    assert fixture.channels.master_dimmer == 1
    assert fixture.channels.hue_speed == 7
    assert fixture.snapshot() == {
        "masterDimmer": 0, "red": 0, "green": 0, "blue": 0,
        "strobe": 0, "mode": 0, "hueSpeed": 0,
    }
    assert bus.writes == []
    assert not fixture.is_animating()


def test_start_channel_below_one_rejected():
    with pytest.raises(ValueError):
        ParLight(RecorderBus(), 0)


def test_master_dimmer_clamps_and_writes_one_channel():
    fixture, bus, _ = make_fixture(10)
    fixture.set_master_dimmer(300)
    fixture.set_master_dimmer(-4)
    assert bus.writes == [{10: 255}, {10: 0}]
    assert fixture.current_state.master_dimmer == 0


def test_set_rgb_single_write():
    fixture, bus, _ = make_fixture()
    fixture.set_rgb(10, 400, -1)
    assert bus.writes == [{2: 10, 3: 255, 4: 0}]


@pytest.mark.parametrize("speed, stored", [(0, 0), (5, 8), (100, 100), (300, 255)])
def test_strobe_minimum(speed, stored):
    fixture, bus, _ = make_fixture()
    fixture.set_strobe(speed)
    assert fixture.current_state.strobe == stored
    assert bus.writes[-1] == {5: stored}


def test_set_color_case_insensitive_and_scaled():
    fixture, bus, _ = make_fixture()
    fixture.set_color("YeLLoW", 200)
    assert bus.writes[-1] == {2: 200, 3: 200, 4: 0}
    assert (fixture.current_state.red, fixture.current_state.green, fixture.current_state.blue) == (200, 200, 0)


def test_set_color_unknown_leaves_state_untouched():
    fixture, bus, _ = make_fixture()
    fixture.set_color("red")
    with pytest.raises(InvalidColor) as excinfo:
        fixture.set_color("pink")
    assert excinfo.value.valid_names == fixture.get_available_colors()
    assert len(excinfo.value.valid_names) == 10
    assert fixture.current_state.red == 255
    assert len(bus.writes) == 1


def test_set_color_non_string_is_invalid_color():
    fixture, _, _ = make_fixture()
    with pytest.raises(InvalidColor):
        fixture.set_color(None)


def test_turn_on_keeps_color_at_full_scale():
    fixture, bus, _ = make_fixture()
    fixture.turn_on(200, "red")
    assert fixture.current_state.master_dimmer == 200
    assert (fixture.current_state.red, fixture.current_state.green, fixture.current_state.blue) == (255, 0, 0)
    assert bus.writes == [{1: 200}, {2: 255, 3: 0, 4: 0}]


def test_turn_on_without_color_only_sets_dimmer():
    fixture, bus, _ = make_fixture()
    fixture.turn_on()
    assert bus.writes == [{1: 255}]


def test_turn_off():
    fixture, bus, _ = make_fixture()
    fixture.turn_on(255, "white").turn_off()
    assert bus.values[1] == 0
    assert (bus.values[2], bus.values[3], bus.values[4]) == (0, 0, 0)


def test_mode_setters():
    fixture, bus, _ = make_fixture()
    fixture.set_hue_pulse(200)
    assert bus.writes[-1] == {6: 135, 7: 200}
    fixture.set_sound_control()
    assert bus.writes[-1] == {6: 235, 7: 128}
    fixture.set_hue_transition(999)
    assert fixture.current_state.hue_speed == 255
    fixture.set_manual_mode()
    assert bus.writes[-1] == {6: 0}
    assert fixture.current_state.hue_speed == 255


def test_set_mode_by_name():
    fixture, bus, _ = make_fixture()
    fixture.set_mode("Hue Shift", 90)
    assert (fixture.current_state.mode, fixture.current_state.hue_speed) == (85, 90)
    fixture.set_mode("manual")
    assert fixture.current_state.mode == 0
    with pytest.raises(InvalidMode):
        fixture.set_mode("disco")


def test_setters_chain():
    fixture, bus, _ = make_fixture()
    result = fixture.turn_on(128, "blue").set_strobe(50).set_hue_select(10)
    assert result is fixture
    assert fixture.to_dmx() == {1: 128, 2: 0, 3: 0, 4: 255, 5: 50, 6: 35, 7: 10}


def test_is_connected():
    fixture, _, _ = make_fixture()
    assert fixture.is_connected()
    assert not ParLight(BrokenBus()).is_connected()
    assert not ParLight(GarbageBus()).is_connected()


@pytest.mark.parametrize("value, connected", [(0, True), (255, True), (300, False), (-1, False)])
def test_is_connected_requires_byte_readback(value, connected):
    assert ParLight(FixedReadBus(value)).is_connected() is connected


def test_starting_animation_stops_previous():
    fixture, _, events = make_fixture()
    fixture.start_pulse("red")
    first = fixture.current_animation
    fixture.start_rainbow()
    second = fixture.current_animation

    assert first is not second
    assert events == [("run", first), ("stop", first), ("run", second)]
    assert fixture.is_animating()


def test_stop_animation_idempotent():
    fixture, _, events = make_fixture()
    fixture.stop_animation()
    assert events == []

    fixture.start_strobe()
    engine = fixture.current_animation
    fixture.stop_animation().stop_animation()
    assert events == [("run", engine), ("stop", engine)]
    assert not fixture.is_animating()


def test_finish_clears_handle_and_calls_back():
    fixture, _, _ = make_fixture()
    calls = []
    fixture.fade_to_color("blue", on_finish=lambda: calls.append("done"))
    engine = fixture.current_animation
    engine.on_finish()
    assert calls == ["done"]
    assert not fixture.is_animating()


def test_stale_finish_does_not_clear_newer_animation():
    fixture, _, _ = make_fixture()
    calls = []
    fixture.fade_to_color("blue", on_finish=lambda: calls.append("old"))
    old = fixture.current_animation
    fixture.fade_dimmer(10)
    new = fixture.current_animation

    old.on_finish()
    assert calls == []
    assert fixture.current_animation is new


def test_invalid_animation_input_keeps_current_animation():
    fixture, _, events = make_fixture()
    fixture.start_pulse()
    running = fixture.current_animation
    with pytest.raises(InvalidColor):
        fixture.fade_to_color("pink")
    assert fixture.current_animation is running
    assert events == [("run", running)]


def test_failed_engine_start_resets_handle():
    class ExplodingEngine(FakeEngine):
        def run(self, plan, bus, on_finish=None):
            raise RuntimeError("no event loop")

    fixture = ParLight(RecorderBus(), engine_factory=lambda: ExplodingEngine([]))
    with pytest.raises(RuntimeError):
        fixture.start_animation(AnimationPlan())
    assert not fixture.is_animating()
