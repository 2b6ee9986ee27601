"""Locate protoc plugin binaries in their usual install locations."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from collections.abc import Iterable
from pathlib import Path

from proman.languages import PromanError, file_exists


def _is_windows() -> bool:
    return sys.platform == "win32"


def _binary(name: str, windows_suffix: str) -> str:
    return name + windows_suffix if _is_windows() else name


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def _on_path(binary: str) -> str | None:
    found = shutil.which(binary)
    return os.path.abspath(found) if found else None


def _first_existing(paths: Iterable[str]) -> str | None:
    return next((os.path.abspath(p) for p in paths if file_exists(p)), None)


def _windows_dirs(*parts: str) -> list[str]:
    dirs = []
    for var in ("APPDATA", "LOCALAPPDATA"):
        base = os.environ.get(var, "")
        if base:
            dirs.append(os.path.join(base, *parts))
    return dirs


def find_protoc_gen_dart() -> str:
    """Find protoc-gen-dart on PATH, in the pub cache or in ./bin."""
    binary = _binary("protoc-gen-dart", ".bat")
    found = _on_path(binary)
    if found:
        return found

    candidates = []
    home = _home_dir()
    if home is not None:
        if _is_windows():
            candidates.extend(
                os.path.join(d, binary) for d in _windows_dirs("Pub", "Cache", "bin")
            )
        else:
            candidates.append(os.path.join(home, ".pub-cache", "bin", binary))
    candidates.append(os.path.join(".", "bin", binary))

    found = _first_existing(candidates)
    if found:
        return found
    raise PromanError("protoc-gen-dart not found in PATH, pub-cache, or ./bin")


def find_protoc_gen_go() -> str:
    """Find protoc-gen-go on PATH, in GOBIN, in GOPATH/bin or in ./bin."""
    binary = _binary("protoc-gen-go", ".exe")
    found = _on_path(binary)
    if found:
        return found

    candidates = []
    gobin = os.environ.get("GOBIN", "")
    if gobin:
        candidates.append(os.path.join(gobin, binary))
    gopath = os.environ.get("GOPATH", "")
    if gopath:
        candidates.append(os.path.join(gopath, "bin", binary))
    else:
        home = _home_dir()
        if home is not None:
            candidates.append(os.path.join(home, "go", "bin", binary))
    candidates.append(os.path.join(".", "bin", binary))

    found = _first_existing(candidates)
    if found:
        return found
    raise PromanError("protoc-gen-go not found in PATH, GOBIN, GOPATH/bin, or ./bin")


def _npm_global_prefix() -> str | None:
    try:
        result = subprocess.run(
            ["npm", "prefix", "-g"], capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return result.stdout.strip()


def find_protoc_gen_ts() -> str:
    """Find protoc-gen-ts on PATH, in npm's global locations or in node_modules."""
    binary = _binary("protoc-gen-ts", ".cmd")
    found = _on_path(binary)
    if found:
        return found

    candidates = []
    prefix = _npm_global_prefix()
    if prefix is not None:
        candidates.append(os.path.join(prefix, "bin", binary))
    home = _home_dir()
    if home is not None:
        if _is_windows():
            candidates.extend(os.path.join(d, binary) for d in _windows_dirs("npm"))
        else:
            candidates.append(os.path.join(home, ".npm-global", "bin", binary))
    candidates.append(os.path.join(".", "node_modules", ".bin", binary))

    found = _first_existing(candidates)
    if found:
        return found
    raise PromanError(
        "protoc-gen-ts not found in PATH, npm global locations, or local node_modules"
    )