import os
import zipfile

import pytest

from plugin_publisher import releases
from plugin_publisher.config import ConfigError, PublishConfig
from plugin_publisher.hashing import sha1_file
from plugin_publisher.manifest import ManifestEntry, parse_line
from plugin_publisher.publish import EXIT_EXHAUSTED, EXIT_OK, publish
from plugin_publisher.releases import read_manifest_lines
from plugin_publisher.verify import verify_entry, verify_releases


@pytest.fixture
def bin_dir(tmp_path):
    d = tmp_path / "bin"
    d.mkdir()
    (d / "Foo.dll").write_bytes(b"\x00binary\x01")
    (d / "Foo.deps.json").write_text("{}")
    return d


def _cfg(bin_dir, pub_dir, version="1.0", **kw):
    kw.setdefault("retry_delay", 0)
    return PublishConfig.build(bin_dir, pub_dir, "foo", "Foo Plugin", version, **kw)


def test_config_derives_names(bin_dir, tmp_path):
    cfg = PublishConfig.build(bin_dir, tmp_path / "pub", "my/plugin", "My Plugin", "2.01.3")
    assert cfg.safe_short_name == "my_plugin"
    assert cfg.package_name == "my_plugin-2.1.3.zip"
    assert cfg.releases_path == tmp_path / "pub" / "RELEASES.txt"


@pytest.mark.parametrize("field, value, message", [
    ("bin_dir", "missing", "binary directory"),
    ("version", "1.x", "version"),
    ("max_attempts", 0, "attempts"),
    ("full_name", "two\nlines", "Full name"),
    ("short_name", "My Plugin", "whitespace"),
    ("short_name", "tab\tname", "whitespace"),
])
def test_config_validation(bin_dir, tmp_path, field, value, message):
    args = dict(bin_dir=bin_dir, pub_dir=tmp_path / "pub", short_name="foo",
                full_name="Foo Plugin", version="1.0")
    if field == "bin_dir":
        value = tmp_path / value
    args[field] = value
    with pytest.raises(ConfigError, match=message):
        PublishConfig.build(**args)
    assert not (tmp_path / "pub").exists()


def test_config_rejects_file_as_pub_dir(bin_dir, tmp_path):
    not_a_dir = tmp_path / "pub"
    not_a_dir.write_text("occupied")
    with pytest.raises(ConfigError, match="publish directory"):
        PublishConfig.build(bin_dir, not_a_dir, "foo", "Foo Plugin", "1.0")


def test_derived_archive_name_round_trips(bin_dir, tmp_path):
    cfg = PublishConfig.build(bin_dir, tmp_path / "pub", "my/plugin", "My Fancy Plugin", "1.2")
    entry = ManifestEntry("0123ABCD", cfg.package_name, cfg.full_name)
    assert parse_line(entry.format()) == entry
    assert entry.matches(cfg.full_name, cfg.safe_short_name)


def test_publish_new_then_update(bin_dir, tmp_path):
    pub = tmp_path / "pub"
    other = "CCCC333 bar-2.0.zip Other Plugin"
    pub.mkdir()
    (pub / "RELEASES.txt").write_text(other + "\n", encoding="utf-8")

    first = publish(_cfg(bin_dir, pub, "1.0"))
    assert first.exit_code == EXIT_OK
    assert not first.persisted.replaced
    archive = pub / "foo-1.0.zip"
    with zipfile.ZipFile(archive) as zf:
        assert sorted(zf.namelist()) == ["Foo.deps.json", "Foo.dll"]
    assert read_manifest_lines(pub / "RELEASES.txt") == [
        other, f"{sha1_file(archive)} foo-1.0.zip Foo Plugin"]

    (bin_dir / "Foo.dll").write_bytes(b"newer build")
    second = publish(_cfg(bin_dir, pub, "1.1"))
    assert second.ok and second.persisted.replaced
    lines = read_manifest_lines(pub / "RELEASES.txt")
    assert lines == [other, f"{second.entry.hash} foo-1.1.zip Foo Plugin"]
    assert second.entry.hash == sha1_file(pub / "foo-1.1.zip")


def test_republish_same_version_is_stable(bin_dir, tmp_path):
    pub = tmp_path / "pub"
    publish(_cfg(bin_dir, pub))
    before = read_manifest_lines(pub / "RELEASES.txt")
    publish(_cfg(bin_dir, pub))
    assert read_manifest_lines(pub / "RELEASES.txt") == before
    assert len(before) == 1


def test_publish_exhausted(bin_dir, tmp_path, monkeypatch):
    def locked(fp):
        raise BlockingIOError("locked")

    monkeypatch.setattr(releases, "_lock_exclusive", locked)
    res = publish(_cfg(bin_dir, tmp_path / "pub", max_attempts=2))
    assert res.exit_code == EXIT_EXHAUSTED
    assert res.persisted.attempts == 2
    # the archive is still built
    assert res.archive_path.exists()


def test_verify_releases_reports_problems(bin_dir, tmp_path):
    pub = tmp_path / "pub"
    publish(_cfg(bin_dir, pub))
    assert verify_releases(pub) == []

    with open(pub / "RELEASES.txt", "a", encoding="utf-8") as f:
        f.write("0000 gone-1.0.zip Gone Plugin" + os.linesep)
    (pub / "foo-1.0.zip").write_bytes(b"tampered")
    problems = verify_releases(pub)
    assert problems == [
        "Hash mismatch: foo-1.0.zip (Foo Plugin)",
        "Missing: gone-1.0.zip (Gone Plugin)",
    ]


def test_verify_releases_without_manifest(tmp_path):
    with pytest.raises(FileNotFoundError):
        verify_releases(tmp_path)


def test_verify_entry_detects_duplicates(tmp_path):
    path = tmp_path / "RELEASES.txt"
    entry = ManifestEntry("AB", "foo-1.0.zip", "Foo Plugin")
    path.write_text(f"{entry.format()}\n{entry.format()}\n", encoding="utf-8")
    assert verify_entry(path, entry, "foo") == ["2 entries for 'Foo Plugin' in manifest"]
    path.write_text("XX foo-0.9.zip Foo Plugin\n", encoding="utf-8")
    assert "does not match" in verify_entry(path, entry, "foo")[0]
