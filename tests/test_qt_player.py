"""Tests for the Qt backend helpers that need no event loop."""

from tarteelflow.audio.qt_player import QtDurationProbe, _to_qurl


def test_remote_locator_kept_as_url():
    url = _to_qurl("https://cdn.test/audio/112/1.mp3")
    assert url.scheme() == "https"
    assert url.toString() == "https://cdn.test/audio/112/1.mp3"


def test_local_path_becomes_file_url(tmp_path):
    path = tmp_path / "ayah.mp3"
    url = _to_qurl(str(path))
    assert url.isLocalFile()
    assert url.toLocalFile() == str(path)


def test_probe_of_empty_locator_settles_immediately():
    probe = QtDurationProbe()
    results = []
    probe.probe("", results.append)
    assert results == [0.0]
    assert probe.pending == 0
