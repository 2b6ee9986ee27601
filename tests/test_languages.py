import subprocess

import pytest

from proman import languages
from proman.languages import (
    LANGUAGES,
    Language,
    Plugin,
    PromanError,
    file_exists,
    languages_from_comma_separated_list,
    list_proto_file_names_in_folder,
    register_language,
    where,
)


class FakeLanguage(Language):
    name = "fake"
    command = "fake"
    plugin_name = "protoc-gen-fake"
    probe_args = ("fake", "--version")
    installer = ("fake", "get")
    plugin_packages = ("one", "two")

    def __init__(self, plugin_path="/opt/plugin", fail=False):
        self.plugin_path = plugin_path
        self.fail = fail

    def find_plugin(self):
        if self.fail:
            raise PromanError("nowhere")
        return self.plugin_path

    def output_args(self, output_folder, grpc):
        return [f"--fake_out={output_folder}", f"--grpc={grpc}"]


class StrictLanguage(FakeLanguage):
    command = "strict"
    requires_proto_files = True


@pytest.fixture
def registered():
    fake = register_language(FakeLanguage())
    strict = register_language(StrictLanguage())
    yield fake, strict
    LANGUAGES.pop("fake", None)
    LANGUAGES.pop("strict", None)


@pytest.fixture
def protos(tmp_path):
    for name in ("b.proto", "a.proto", "notes.txt", "c.proto.bak"):
        (tmp_path / name).write_text("")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "d.proto").write_text("")
    return tmp_path


def test_register_language_uses_command_as_key(registered):
    fake, strict = registered
    assert LANGUAGES["fake"] is fake
    assert LANGUAGES["strict"] is strict


def test_languages_from_list_preserves_order_and_trims(registered):
    fake, strict = registered
    assert languages_from_comma_separated_list("strict, fake") == [strict, fake]


def test_languages_from_list_unknown_raises(registered):
    with pytest.raises(PromanError, match="Language nope not found"):
        languages_from_comma_separated_list("fake,nope")


def test_languages_from_empty_list_raises(registered):
    with pytest.raises(PromanError, match="not found"):
        languages_from_comma_separated_list("")


def test_list_proto_files_only_direct_proto_names_sorted(protos):
    assert list_proto_file_names_in_folder(protos) == ["a.proto", "b.proto"]


def test_list_proto_files_missing_folder_is_empty(tmp_path):
    assert list_proto_file_names_in_folder(tmp_path / "missing") == []


def test_file_exists(tmp_path):
    target = tmp_path / "f"
    target.write_text("x")
    assert file_exists(target) is True
    assert file_exists(tmp_path) is False
    assert file_exists(tmp_path / "absent") is False


def test_cmd_for_gen_source_layout(protos):
    cmd = Language.cmd_for_gen_source(FakeLanguage(), "protoc", "/imports", str(protos), "/out", True)
    assert cmd == [
        "protoc",
        "--plugin=protoc-gen-fake=/opt/plugin",
        "--proto_path=/imports",
        f"--proto_path={protos}",
        "--fake_out=/out",
        "--grpc=True",
        "a.proto",
        "b.proto",
    ]


def test_cmd_for_gen_source_without_files_allowed(tmp_path):
    cmd = Language.cmd_for_gen_source(FakeLanguage(), "protoc", "/imports", str(tmp_path), "/out", False)
    assert cmd[-1] == "--grpc=False"


def test_cmd_for_gen_source_requires_files(tmp_path):
    with pytest.raises(PromanError, match="no proto files found in"):
        Language.cmd_for_gen_source(StrictLanguage(), "protoc", "/imports", str(tmp_path), "/out", False)


def test_cmd_for_gen_source_wraps_plugin_error(protos):
    with pytest.raises(PromanError, match="failed to find protoc-gen-fake: nowhere"):
        Language.cmd_for_gen_source(FakeLanguage(fail=True), "protoc", "/i", str(protos), "/o", False)


def test_plugins_lists_install_commands(registered):
    fake = register_language(FakeLanguage())
    assert fake.plugins == ["fake get one", "fake get two"]


def test_install_plugins_runs_each_package(monkeypatch):
    calls = []

    def fake_run(args, **kwargs):
        calls.append(list(args))
        return subprocess.CompletedProcess(args, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    result = Language.install_plugins(FakeLanguage())
    assert result is None
    assert calls == [["fake", "get", "one"], ["fake", "get", "two"]]


def test_install_plugins_failure_names_package(monkeypatch):
    def fake_run(args, **kwargs):
        raise subprocess.CalledProcessError(1, args)

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(PromanError, match="failed to install one"):
        Language.install_plugins(FakeLanguage())


def test_is_installed_reflects_exit_code(monkeypatch):
    codes = iter([0, 3])
    monkeypatch.setattr(
        subprocess, "run", lambda args, **kw: subprocess.CompletedProcess(args, next(codes))
    )
    lang = FakeLanguage()
    assert Language.is_installed(lang) is True
    assert Language.is_installed(lang) is False


def test_is_installed_missing_tool(monkeypatch):
    def fake_run(args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert Language.is_installed(FakeLanguage()) is False


def test_where_strips_line_endings(monkeypatch):
    seen = []

    def fake_run(args, **kwargs):
        seen.append(args)
        return subprocess.CompletedProcess(args, 0, stdout=b"/usr/bin/tool\r\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert where("tool") == "/usr/bin/tool"
    assert seen[0][1] == "tool"
    assert seen[0][0] in ("which", "where")


def test_where_failure_raises(monkeypatch):
    def fake_run(args, **kwargs):
        raise subprocess.CalledProcessError(1, args)

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(PromanError, match="tool not found"):
        where("tool")


def test_plugin_dataclass_fields():
    plugin = Plugin(name="protoc-gen-fake", install_location="/opt")
    assert (plugin.name, plugin.install_location) == ("protoc-gen-fake", "/opt")
    assert plugin == Plugin("protoc-gen-fake", "/opt")


def test_language_is_abstract():
    with pytest.raises(TypeError):
        languages.Language()