"""Tests for the pydub duration probe, inline and on the thread pool."""

import io
from unittest.mock import MagicMock, patch

import pytest
import requests
from pydub import AudioSegment

from tarteelflow.audio.pydub_probe import PydubDurationProbe, _ProbeJob, _format_from_url
from tarteelflow.errors import DurationProbeFailure

from conftest import process_events_until


def _wav_bytes(milliseconds):
    buffer = io.BytesIO()
    AudioSegment.silent(duration=milliseconds).export(buffer, format="wav")
    return buffer.getvalue()


@pytest.fixture
def wav_file(tmp_path):
    path = tmp_path / "ayah.wav"
    path.write_bytes(_wav_bytes(1500))
    return path


def _session(status=200, content=b"", error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        resp = MagicMock()
        resp.status_code = status
        resp.content = content
        session.get.return_value = resp
    return session


def _probe_once(probe, url):
    results = []
    probe.probe(url, results.append)
    assert len(results) == 1
    return results[0]


def test_format_from_url():
    assert _format_from_url("https://cdn.test/audio/112/1.mp3") == "mp3"
    assert _format_from_url("https://cdn.test/audio/112/1.WAV?token=abc") == "wav"
    assert _format_from_url("https://cdn.test/stream") is None


def test_measures_local_file(wav_file):
    probe = PydubDurationProbe()
    assert probe.measure(str(wav_file)) == pytest.approx(1.5, abs=0.01)
    assert _probe_once(probe, str(wav_file)) == pytest.approx(1.5, abs=0.01)


def test_measures_download():
    session = _session(content=_wav_bytes(2500))
    probe = PydubDurationProbe(session=session, timeout=5)
    assert _probe_once(probe, "https://cdn.test/audio/1/2.wav") == pytest.approx(2.5, abs=0.01)
    session.get.assert_called_once_with("https://cdn.test/audio/1/2.wav", timeout=5)


@pytest.mark.parametrize(
    "session",
    [
        _session(status=404),
        _session(error=requests.Timeout("timed out")),
    ],
)
def test_download_failure_reports_zero(session):
    probe = PydubDurationProbe(session=session)
    with pytest.raises(DurationProbeFailure):
        probe.measure("https://cdn.test/audio/1/2.wav")
    assert _probe_once(probe, "https://cdn.test/audio/1/2.wav") == 0.0


def test_missing_local_file_reports_zero(tmp_path):
    probe = PydubDurationProbe()
    assert _probe_once(probe, str(tmp_path / "missing.wav")) == 0.0


def test_empty_locator_reports_zero():
    probe = PydubDurationProbe()
    with pytest.raises(DurationProbeFailure, match="empty locator"):
        probe.measure("")
    assert _probe_once(probe, "") == 0.0


def test_failure_message_names_locator():
    probe = PydubDurationProbe(session=_session(status=500))
    with pytest.raises(DurationProbeFailure) as excinfo:
        probe.measure("https://cdn.test/x.mp3")
    assert excinfo.value.url == "https://cdn.test/x.mp3"
    assert "status 500" in str(excinfo.value)


# --- Threaded measurement ---

def _capture(job):
    seen = {"failed": [], "resolved": []}
    job.signals.failed.connect(seen["failed"].append)
    job.signals.resolved.connect(seen["resolved"].append)
    return seen


def test_job_reports_measured_duration(wav_file):
    job = _ProbeJob(PydubDurationProbe().measure, str(wav_file))
    seen = _capture(job)
    job.run()
    assert seen["failed"] == []
    assert seen["resolved"] == [pytest.approx(1.5, abs=0.01)]


def test_job_reports_probe_failure():
    job = _ProbeJob(PydubDurationProbe().measure, "")
    seen = _capture(job)
    job.run()
    assert "empty locator" in seen["failed"][0]
    assert seen["resolved"] == [0.0]


def test_job_survives_unexpected_decoder_error():
    """Errors other than DurationProbeFailure still resolve to 0.0 instead of escaping."""

    def broken_measure(url):
        raise IndexError("list index out of range")

    job = _ProbeJob(broken_measure, "https://cdn.test/no-audio-stream.mp3")
    seen = _capture(job)
    job.run()
    assert len(seen["failed"]) == 1
    assert "no-audio-stream.mp3" in seen["failed"][0]
    assert seen["resolved"] == [0.0]


def test_threaded_probe_delivers_on_event_loop(qapp, wav_file):
    probe = PydubDurationProbe(threaded=True)
    results = []
    probe.probe(str(wav_file), results.append)
    assert process_events_until(qapp, lambda: results)
    assert results == [pytest.approx(1.5, abs=0.01)]
    assert probe._jobs == {}


def test_threaded_probe_failure_reports_zero(qapp, tmp_path):
    probe = PydubDurationProbe(threaded=True)
    results = []
    probe.probe(str(tmp_path / "missing.wav"), results.append)
    assert process_events_until(qapp, lambda: results)
    assert results == [0.0]
    assert probe._jobs == {}


def test_threaded_probe_unexpected_error_reports_zero(qapp):
    probe = PydubDurationProbe(threaded=True)
    results = []
    with patch.object(PydubDurationProbe, "measure", side_effect=KeyError("codec_type")):
        probe.probe("https://cdn.test/x.mp3", results.append)
        assert process_events_until(qapp, lambda: results)
    assert results == [0.0]
