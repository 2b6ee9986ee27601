"""Installing protoc, its language plugins and the well-known Google protos."""

from __future__ import annotations

import json
import os
import platform
import shutil
import subprocess
import sys
import urllib.error
import urllib.request
import zipfile
from collections.abc import Iterable

from proman.languages import LANGUAGES, Language, PromanError

RELEASES_URL = "https://api.github.com/repos/protocolbuffers/protobuf/releases"
GOOGLE_PROTOS_REPO = "https://github.com/protocolbuffers/protobuf.git"
EXT = ".exe" if sys.platform == "win32" else ""

_SEPARATOR = "---------------------***------------------------------------------------"

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}


def _home() -> str:
    home = os.environ.get("HOME", "") or os.path.expanduser("~")
    if not home or home == "~":
        raise PromanError("$HOME is not defined")
    return home


def _user_dir(windows_var: str, darwin_parts: tuple[str, ...], xdg_var: str, xdg_default: str) -> str:
    if sys.platform == "win32":
        directory = os.environ.get(windows_var, "")
        if not directory:
            raise PromanError(f"%{windows_var}% is not defined")
        return directory
    if sys.platform == "darwin":
        return os.path.join(_home(), *darwin_parts)
    directory = os.environ.get(xdg_var, "")
    if not directory:
        return os.path.join(_home(), xdg_default)
    if not os.path.isabs(directory):
        raise PromanError(f"path in ${xdg_var} is relative")
    return directory


def user_config_dir() -> str:
    """The per-user configuration directory of this platform."""
    return _user_dir("APPDATA", ("Library", "Application Support"), "XDG_CONFIG_HOME", ".config")


def user_cache_dir() -> str:
    """The per-user cache directory of this platform."""
    return _user_dir("LOCALAPPDATA", ("Library", "Caches"), "XDG_CACHE_HOME", ".cache")


def protoc_manager_dir() -> str:
    """Directory where proman keeps protoc and the Google protos."""
    return os.path.join(user_config_dir(), "protocmanager")


def protoc_cmd_path() -> str:
    """Path of the protoc binary managed by proman."""
    return os.path.join(protoc_manager_dir(), "protoc" + EXT)


def google_protos_src_dir() -> str:
    """Import path of the well-known Google proto files."""
    return os.path.join(protoc_manager_dir(), "protobuf", "src")


def remove_protoc(path: str | None = None) -> None:
    """Delete the managed protoc binary so it is reinstalled next time."""
    os.remove(path if path is not None else protoc_cmd_path())


def is_protoc_installed(path: str | None = None) -> bool:
    """Whether ``protoc --version`` runs successfully."""
    try:
        result = subprocess.run(
            [path if path is not None else protoc_cmd_path(), "--version"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0


def _go_platform() -> tuple[str, str]:
    if sys.platform == "win32":
        os_name = "windows"
    elif sys.platform == "darwin":
        os_name = "darwin"
    else:
        os_name = sys.platform
    machine = platform.machine().lower()
    return os_name, _ARCH_ALIASES.get(machine, machine)


def protoc_filename(version: str, os_name: str, arch: str) -> str:
    """Name of the protoc release archive for an OS and architecture."""
    match os_name, arch:
        case "linux", "amd64":
            return f"protoc-{version}-linux-x86_64.zip"
        case "linux", "386":
            return f"protoc-{version}-linux-x86_32.zip"
        case "linux", "arm64":
            return f"protoc-{version}-linux-aarch_64.zip"
        case "linux", "ppc64le":
            return f"protoc-{version}-linux-ppcle_64.zip"
        case "linux", "s390x":
            return f"protoc-{version}-linux-s390_64.zip"
        case "darwin", "amd64":
            return f"protoc-{version}-osx-x86_64.zip"
        case "darwin", "arm64":
            return f"protoc-{version}-osx-aarch_64.zip"
        case "darwin", _:
            return f"protoc-{version}-osx-universal_binary.zip"
        case "windows", "amd64":
            return f"protoc-{version}-win64.zip"
        case "windows", "386":
            return f"protoc-{version}-win32.zip"
    raise PromanError(f"unsupported GOOS/GOARCH combo: {os_name}/{arch}")


def download_file(url: str, filename: str) -> None:
    """Download ``url`` into ``filename``."""
    try:
        with urllib.request.urlopen(url) as resp:
            if resp.status != 200:
                raise PromanError(f"bad status: {resp.status} {resp.reason}")
            try:
                with open(filename, "wb") as out:
                    shutil.copyfileobj(resp, out)
            except OSError as err:
                raise PromanError(f"error saving file: {err}") from err
    except urllib.error.HTTPError as err:
        raise PromanError(f"bad status: {err.code} {err.reason}") from err
    except urllib.error.URLError as err:
        raise PromanError(f"error downloading: {err}") from err


def unzip(src: str, dest: str) -> None:
    """Extract the zip archive ``src`` into ``dest``, keeping file modes."""
    try:
        archive = zipfile.ZipFile(src)
    except (OSError, zipfile.BadZipFile) as err:
        raise PromanError(f"error opening zip file: {err}") from err
    with archive:
        for info in archive.infolist():
            target = os.path.join(dest, info.filename)
            if info.is_dir():
                os.makedirs(target, exist_ok=True)
                continue
            os.makedirs(os.path.dirname(target) or ".", exist_ok=True)
            try:
                with archive.open(info) as source, open(target, "wb") as out:
                    shutil.copyfileobj(source, out)
            except OSError as err:
                raise PromanError(f"error writing file: {err}") from err
            mode = (info.external_attr >> 16) & 0o777
            if mode:
                os.chmod(target, mode)


def _fetch_releases() -> list[dict]:
    request = urllib.request.Request(
        RELEASES_URL, headers={"Accept": "application/vnd.github+json"}
    )
    try:
        with urllib.request.urlopen(request) as resp:
            return json.load(resp)
    except (urllib.error.URLError, ValueError) as err:
        raise PromanError(f"error listing protoc releases: {err}") from err


def install_protoc() -> None:
    """Download the latest protoc release into the proman directory."""
    print("installing latest protoc")
    releases = _fetch_releases()
    if not releases:
        raise PromanError("no releases found")
    latest = releases[0]
    tag = latest["tag_name"]
    print(tag)
    filename = protoc_filename(tag.removeprefix("v"), *_go_platform())
    asset = next(
        (a for a in latest.get("assets", []) if a.get("name") == filename), None
    )
    if asset is None:
        raise PromanError("no release asset found")

    print("downloading")
    archive = os.path.join(user_cache_dir(), filename)
    download_file(asset["browser_download_url"], archive)
    folder = archive.removesuffix(".zip")
    try:
        print("unzipping")
        unzip(archive, folder)
        target_dir = protoc_manager_dir()
        try:
            os.mkdir(target_dir, 0o755)
        except FileExistsError:
            pass
        except OSError as err:
            raise PromanError(f"error creating protocmanager dir: {err}") from err
        try:
            shutil.move(
                os.path.join(folder, "bin", "protoc" + EXT),
                os.path.join(target_dir, "protoc" + EXT),
            )
        except OSError as err:
            raise PromanError(f"error moving protoc: {err}") from err
    finally:
        try:
            os.remove(archive)
        except OSError:
            pass
        shutil.rmtree(folder, ignore_errors=True)
    if not is_protoc_installed():
        raise PromanError("error running protoc")


def install_lang_plugins(languages: Iterable[Language] | None = None) -> None:
    """Install protoc plugins for every language available on this machine."""
    print("installing protoc plugins")
    for lang in LANGUAGES.values() if languages is None else languages:
        print(_SEPARATOR)
        if not lang.is_installed():
            print(f"your system doesn't support language: '{lang.name}', skipping it.")
            continue
        print(f"installing latest protoc plugins for language: '{lang.name}'")
        try:
            lang.install_plugins()
        except (PromanError, OSError) as err:
            print(f"failed to install protoc plugins for language: '{lang.name}', err: {err}")
            continue
        print(f"done installing protoc plugins for language: '{lang.name}'")


def is_google_protos_installed() -> bool:
    """Whether the protobuf checkout exists in the current directory."""
    return os.path.exists("protobuf")


def install_google_protos() -> None:
    """Clone the protobuf repository into the current directory."""
    try:
        subprocess.run(
            ["git", "clone", GOOGLE_PROTOS_REPO],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as err:
        raise PromanError(f"error downloading google protos: {err}") from err