from pathlib import Path

from clipmerge.core.sources import (
    SourceSpec,
    filter_sources,
    parse_identifier,
    resolve_sources,
)


def _ids(specs):
    return [s.identifier for s in specs]


def test_accepts_only_known_extensions_case_insensitive():
    candidates = [
        "/v/a.mov",
        "/v/b.MP4",
        "/v/c.m4v",
        "/v/d.avi",
        "/v/e.mkv",
        "/v/f.Mov",
        "/v/noext",
        "/v/g.mp4.txt",
    ]
    assert _ids(filter_sources(candidates)) == ["/v/a.mov", "/v/b.MP4", "/v/c.m4v", "/v/f.Mov"]


def test_survivor_order_is_preserved():
    candidates = ["z.mp4", "bad.gif", "a.mov", "", "m.m4v"]
    assert _ids(filter_sources(candidates)) == ["z.mp4", "a.mov", "m.m4v"]


def test_empty_and_unparseable_identifiers_are_dropped():
    candidates = [None, "", "   ", "a\x00b.mp4", 42, "http://[::1.mp4", "file://", "ok.mp4"]
    assert _ids(filter_sources(candidates)) == ["ok.mp4"]


def test_uri_and_path_identifiers():
    assert parse_identifier("file:///tmp/My%20Clip.MOV") == "/tmp/My Clip.MOV"
    assert SourceSpec("file:///tmp/My%20Clip.MOV").extension == "mov"
    assert SourceSpec("https://cdn.example.com/cam/1.mp4?sig=abc").extension == "mp4"
    assert SourceSpec(r"C:\clips\day1.M4V").extension == "m4v"
    assert _ids(filter_sources([Path("/v/a.mp4")])) == ["/v/a.mp4"]


def test_declared_positions_define_order():
    specs = [SourceSpec("b.mp4", 2), SourceSpec("a.mp4", 1), SourceSpec("c.mp4", 2)]
    assert _ids(filter_sources(specs)) == ["a.mp4", "b.mp4", "c.mp4"]


def test_resolve_opens_each_survivor_once():
    opened = []

    def opener(spec):
        opened.append(spec.identifier)
        return ("asset", spec.identifier)

    assets = resolve_sources(["a.mp4", "b.txt", "c.mov"], opener=opener)
    assert assets == [("asset", "a.mp4"), ("asset", "c.mov")]
    assert opened == ["a.mp4", "c.mov"]


def test_resolve_does_not_check_existence(tmp_path):
    missing = tmp_path / "never-written.mp4"
    assets = resolve_sources([str(missing), str(missing)])
    assert [a.identifier for a in assets] == [str(missing), str(missing)]
