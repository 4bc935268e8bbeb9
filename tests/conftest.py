"""Shared fixtures for TarteelFlow tests."""

import time

import pytest

from tarteelflow.audio.capability import AudioCapability, DurationProbe
from tarteelflow.connectors.base import BaseConnector
from tarteelflow.data.works import Unit, Work
from tarteelflow.errors import ContentLoadError, PlaybackFailure


class FakeAudio(AudioCapability):
    """Scripted player: records commands, lets tests push time and end."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.source = None
        self.position = 0.0
        self.fail_load = False
        self.fail_play = False

    def load(self, url):
        self.calls.append(("load", url))
        if self.fail_load:
            raise PlaybackFailure(f"cannot load {url}")
        self.source = url
        self.position = 0.0

    def play(self):
        self.calls.append(("play",))
        if self.fail_play:
            raise PlaybackFailure("cannot play")

    def pause(self):
        self.calls.append(("pause",))

    def stop(self):
        self.calls.append(("stop",))
        self.source = None
        self.position = 0.0

    def current_time(self):
        return self.position

    def duration(self):
        return 0.0

    # Test helpers

    def tick(self, seconds):
        self.position = seconds
        self._emit_time_update(seconds)

    def finish(self):
        self._emit_ended()

    def fail(self, message="decoder error"):
        self._emit_metadata_error(message)

    def loaded(self):
        return [c[1] for c in self.calls if c[0] == "load"]


class InstantProbe(DurationProbe):
    """Answers from a url → seconds table before returning (0.0 if unknown)."""

    def __init__(self, durations=None):
        self.durations = dict(durations or {})
        self.probed = []

    def probe(self, url, callback):
        self.probed.append(url)
        callback(self.durations.get(url, 0.0))


class DeferredProbe(DurationProbe):
    """Holds callbacks until the test settles them."""

    def __init__(self):
        self.pending = []

    def probe(self, url, callback):
        self.pending.append((url, callback))

    def settle_all(self, seconds=1.0):
        pending, self.pending = self.pending, []
        for _url, callback in pending:
            callback(seconds)


def make_work(number, durations, narrator="4"):
    """Build a Work whose ayah urls encode surah, ayah and reciter."""
    units = tuple(
        Unit(
            number=i + 1,
            text=f"ayah {number}:{i + 1}",
            translation=f"translation {number}:{i + 1}",
            audio_url=f"https://audio.test/{narrator}/{number}/{i + 1}.mp3",
        )
        for i in range(len(durations))
    )
    return Work(
        number=number,
        name=f"Surah-{number}",
        arabic_name=f"سورة {number}",
        full_audio_url=f"https://audio.test/{narrator}/{number}.mp3",
        units=units,
    )


def durations_table(works, durations_by_work):
    table = {}
    for work in works:
        for unit, seconds in zip(work.units, durations_by_work[work.number]):
            table[unit.audio_url] = seconds
    return table


class FakeConnector(BaseConnector):
    """Serves works built by make_work; can be told to fail."""

    def __init__(self, layout):
        self.layout = layout  # surah number -> list of ayah durations
        self.fail = False
        self.requests = []

    def get_work(self, work_id, narrator):
        self.requests.append((work_id, narrator))
        if self.fail:
            raise ContentLoadError("Request failed: https://quranapi.test/1.json (status 503)")
        return make_work(work_id, self.layout[work_id], narrator)


LAYOUT = {1: [2.0, 3.0, 1.5], 112: [1.0, 1.0, 1.0, 2.0], 113: [4.0]}


@pytest.fixture
def fake_audio():
    return FakeAudio()


@pytest.fixture
def three_ayah_work():
    """The [2.0, 3.0, 1.5] surah used throughout the timing tests."""
    return make_work(1, LAYOUT[1])


@pytest.fixture
def fake_connector():
    return FakeConnector(LAYOUT)


@pytest.fixture
def instant_probe():
    table = {}
    for narrator in ("1", "4"):
        for number, durations in LAYOUT.items():
            work = make_work(number, durations, narrator)
            table.update(durations_table([work], {number: durations}))
    return InstantProbe(table)


@pytest.fixture
def deferred_probe():
    return DeferredProbe()


@pytest.fixture(scope="session")
def qapp():
    """A Qt core application so queued signals can be delivered."""
    from PyQt6.QtCore import QCoreApplication

    return QCoreApplication.instance() or QCoreApplication([])


def process_events_until(app, condition, timeout=5.0):
    """Pump the Qt event loop until *condition()* holds or *timeout* passes."""
    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.01)
    return condition()
