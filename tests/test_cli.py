"""Tests for the castdeploy command line."""

import io
import json
import shutil
import tarfile

import pytest

import castdeploy
from castdeploy import main
from castdeploy.commands.history import format_entry
from castdeploy.deploy.snapshot import FileRecord, SnapshotEntry, utc_now


def run_cli(*argv):
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


def write_bundle(path, files):
    with tarfile.open(path, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return str(path)


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert run_cli() == 1
        assert "usage: castdeploy" in capsys.readouterr().out

    def test_version(self, capsys):
        assert run_cli("--version") == 0
        assert castdeploy.__version__ in capsys.readouterr().out

    def test_deploy_requires_target(self):
        assert run_cli("deploy", "app.tar.gz") == 2


class TestConfigCommand:
    def test_set_and_show_lang(self, tmp_path, capsys):
        path = str(tmp_path / "config.yaml")

        assert run_cli("config", "--lang", "en", "--path", path) == 0
        assert run_cli("config", "--path", path) == 0

        out = capsys.readouterr().out
        assert f"Saved {path}" in out
        assert out.strip().endswith("lang: en")

    def test_missing_file_shows_default(self, tmp_path, capsys):
        assert run_cli("config", "--path", str(tmp_path / "none.yaml")) == 0
        assert "lang: zh" in capsys.readouterr().out


@pytest.mark.skipif(shutil.which("tar") is None, reason="tar not available")
class TestDeployAndHistoryCommands:
    def test_local_deploy_then_history(self, tmp_path, capsys):
        # Arrange
        target = tmp_path / "www"
        target.mkdir()
        bundle = write_bundle(tmp_path / "site.tar.gz", {"index.html": "hi", "app.js": "js"})

        # Act
        deploy_code = run_cli("deploy", bundle, "-t", str(target), "--lang", "en")
        history_code = run_cli("history", "-t", str(target), "--files", "--lang", "en")

        # Assert
        assert deploy_code == 0
        assert history_code == 0
        assert (target / "index.html").read_text() == "hi"
        out = capsys.readouterr().out
        assert "2 entries placed, 0 replaced, 0 backed up, 0 removed" in out
        assert "site.tar.gz" in out
        assert "1 deploy(s), 2 managed path(s)" in out
        assert "latest: site.tar.gz at " in out

        # The uploaded bundle copy is removed after the deploy
        leftovers = sorted(p.name for p in (target / ".castdeploy").iterdir())
        assert leftovers == ["snapshot.json"]
        doc = json.loads((target / ".castdeploy" / "snapshot.json").read_text())
        assert doc["entries"][0]["bundle_name"] == "site.tar.gz"

    def test_redeploy_replaces_managed_files_without_prompt(self, tmp_path, capsys):
        target = tmp_path / "www"
        target.mkdir()
        v1 = write_bundle(tmp_path / "v1.tar.gz", {"app.js": "1"})
        v2 = write_bundle(tmp_path / "v2.tar.gz", {"app.js": "2"})

        assert run_cli("deploy", v1, "-t", str(target), "--lang", "en") == 0
        assert run_cli("deploy", v2, "-t", str(target), "--lang", "en", "--bundle-name", "release-2") == 0

        assert (target / "app.js").read_text() == "2"
        assert "1 entry placed, 1 replaced" in capsys.readouterr().out

    def test_missing_bundle(self, tmp_path, capsys):
        assert run_cli("deploy", str(tmp_path / "nope.tar.gz"), "-t", str(tmp_path)) == 1
        assert "Bundle not found" in capsys.readouterr().err

    def test_history_of_empty_target(self, tmp_path, capsys):
        assert run_cli("history", "-t", str(tmp_path), "--lang", "en") == 0
        assert f"No deployment history for {tmp_path}" in capsys.readouterr().out

    def test_history_normalizes_trailing_slash(self, tmp_path, capsys):
        assert run_cli("history", "-t", f"{tmp_path}//", "--lang", "en") == 0
        assert capsys.readouterr().out.strip() == f"No deployment history for {tmp_path}"

    def test_history_of_malformed_snapshot(self, tmp_path, capsys):
        meta = tmp_path / ".castdeploy"
        meta.mkdir()
        (meta / "snapshot.json").write_text('{"entries": [{"bundle_name": "b", "deployed_at": 123}]}')

        assert run_cli("history", "-t", str(tmp_path), "--lang", "en") == 1
        assert "Could not read snapshot" in capsys.readouterr().err

    def test_unknown_device(self, tmp_path, capsys):
        bundle = write_bundle(tmp_path / "b.tar.gz", {"a": "a"})

        assert run_cli("deploy", bundle, "-t", str(tmp_path), "-d", "somewhere") == 1
        assert "Unknown device format" in capsys.readouterr().err


class TestFormatEntry:
    def test_with_files(self):
        entry = SnapshotEntry.create("app.tar.gz", "0123456789abcdef", [
            FileRecord("app.js", "fedcba9876543210", utc_now()),
            FileRecord("static", "", utc_now()),
        ])

        lines = format_entry(3, entry, show_files=True)

        assert lines[0].startswith("#3 ")
        assert "app.tar.gz  0123456789ab  (2 file(s))" in lines[0]
        assert lines[1].strip() == "fedcba987654  app.js"
        assert lines[2].strip().split() == ["-", "static"]
