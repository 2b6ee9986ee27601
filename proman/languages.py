"""Language registry and helpers shared by the protoc target languages."""

from __future__ import annotations

import os
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path


class PromanError(Exception):
    """Raised when a proman operation cannot be completed."""


@dataclass(frozen=True)
class Plugin:
    """A protoc plugin and where it gets installed."""

    name: str
    install_location: str


class Language(ABC):
    """A target language that protoc can generate sources for.

    Subclasses describe the language with class attributes and supply the
    plugin lookup and the output flags; everything else is shared.
    """

    name: str = ""
    command: str = ""
    plugin_name: str = ""
    probe_args: tuple[str, ...] = ()
    installer: tuple[str, ...] = ()
    plugin_packages: tuple[str, ...] = ()
    requires_proto_files: bool = False

    def is_installed(self) -> bool:
        """Whether the language's toolchain can be run on this machine."""
        try:
            result = subprocess.run(
                list(self.probe_args),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            return False
        return result.returncode == 0

    def install_plugins(self) -> None:
        """Install every protoc plugin the language needs."""
        for package in self.plugin_packages:
            try:
                subprocess.run(
                    [*self.installer, package],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    check=True,
                )
            except (OSError, subprocess.CalledProcessError) as err:
                raise PromanError(f"failed to install {package}: {err}") from err

    @property
    def plugins(self) -> list[str]:
        """The shell commands that install the language's plugins."""
        return [" ".join((*self.installer, package)) for package in self.plugin_packages]

    def cmd_for_gen_source(
        self,
        protoc_cmd: str,
        imports_path: str,
        input_folder: str,
        output_folder: str,
        grpc: bool,
    ) -> list[str]:
        """Build the protoc command line that generates sources for this language."""
        try:
            plugin_path = self.find_plugin()
        except PromanError as err:
            raise PromanError(f"failed to find {self.plugin_name}: {err}") from err
        files = list_proto_file_names_in_folder(input_folder)
        if self.requires_proto_files and not files:
            raise PromanError(f"no proto files found in {input_folder}")
        return [
            protoc_cmd,
            f"--plugin={self.plugin_name}={plugin_path}",
            f"--proto_path={imports_path}",
            f"--proto_path={input_folder}",
            *self.output_args(output_folder, grpc),
            *files,
        ]

    @abstractmethod
    def find_plugin(self) -> str:
        """Return the absolute path of the language's protoc plugin."""

    @abstractmethod
    def output_args(self, output_folder: str, grpc: bool) -> list[str]:
        """Return the protoc flags that direct generated output."""


LANGUAGES: dict[str, Language] = {}


def register_language(lang: Language) -> Language:
    """Add a language to the registry under its command name."""
    LANGUAGES[lang.command] = lang
    return lang


def languages_from_comma_separated_list(names: str) -> list[Language]:
    """Look up registered languages from a list such as ``"go, dart"``."""
    found = []
    for raw in names.split(","):
        lang = LANGUAGES.get(raw.strip(" "))
        if lang is None:
            raise PromanError(f"Language {raw} not found")
        found.append(lang)
    return found


def list_proto_file_names_in_folder(folder: str | os.PathLike[str]) -> list[str]:
    """Names of the ``*.proto`` entries directly inside ``folder``, sorted."""
    try:
        entries = os.listdir(folder)
    except (FileNotFoundError, NotADirectoryError):
        return []
    return sorted(name for name in entries if fnmatchcase(name, "*.proto"))


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Whether ``path`` exists and is not a directory."""
    candidate = Path(path)
    return candidate.exists() and not candidate.is_dir()


def where(command: str) -> str:
    """Locate ``command`` with the system's ``which``/``where`` tool."""
    finder = "where" if sys.platform == "win32" else "which"
    try:
        result = subprocess.run([finder, command], capture_output=True, check=True)
    except (OSError, subprocess.CalledProcessError) as err:
        raise PromanError(f"{command} not found: {err}") from err
    output = result.stdout.decode()
    return output.removesuffix("\n").removesuffix("\r")