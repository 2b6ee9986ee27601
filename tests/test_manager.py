import os
import stat
import sys

import pytest

from proman.install import google_protos_src_dir, protoc_cmd_path, protoc_manager_dir
from proman.languages import LANGUAGES, Language, PromanError
from proman.manager import generate


class _Runner(Language):
    name = "fake-runner"
    command = "fake-runner"

    def __init__(self, argv):
        self.argv = argv
        self.calls = []

    def cmd_for_gen_source(self, protoc_cmd, imports_path, input_folder, output_folder, grpc):
        self.calls.append((protoc_cmd, imports_path, input_folder, output_folder, grpc))
        return self.argv

    def find_plugin(self):
        return ""

    def output_args(self, output_folder, grpc):
        return []


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "cfg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


@pytest.fixture
def installed(home):
    manager_dir = protoc_manager_dir()
    os.makedirs(os.path.join(manager_dir, "protobuf"))
    protoc = protoc_cmd_path()
    with open(protoc, "w") as fh:
        fh.write("#!/bin/sh\nexit 0\n")
    os.chmod(protoc, os.stat(protoc).st_mode | stat.S_IXUSR)
    return home


def test_generate_fails_without_manager_dir(home):
    with pytest.raises(PromanError, match="error changing directory to protoc manager directory"):
        generate("go", "in", "out", "", False)


def test_generate_unknown_language(installed):
    with pytest.raises(PromanError, match="Language cobol not found"):
        generate("cobol", "in", "out", "", False)
    assert os.path.exists(protoc_cmd_path())


def test_generate_runs_language_command(installed, monkeypatch, capsys):
    runner = _Runner([sys.executable, "-c", "pass"])
    monkeypatch.setitem(LANGUAGES, "fake-runner", runner)
    expected_in = os.path.join(os.getcwd(), "protos")
    expected_out = os.path.join(os.getcwd(), "gen")
    generate("fake-runner", "protos", "gen", "", True)
    assert runner.calls == [
        (protoc_cmd_path(), google_protos_src_dir(), expected_in, expected_out, True)
    ]
    assert "generated succesfully" in capsys.readouterr().out


def test_generate_reports_failing_command(installed, monkeypatch):
    runner = _Runner([sys.executable, "-c", "import sys; print('bad proto'); sys.exit(3)"])
    monkeypatch.setitem(LANGUAGES, "fake-runner", runner)
    with pytest.raises(PromanError, match="error running command") as info:
        generate("fake-runner", "protos", "gen", "", False)
    assert "bad proto" in str(info.value)
    assert os.path.exists(protoc_cmd_path())