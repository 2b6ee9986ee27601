"""Generating sources from proto files with the managed protoc."""

from __future__ import annotations

import os
import subprocess

import proman.targets  # noqa: F401  registers the target languages
from proman.install import (
    google_protos_src_dir,
    install_google_protos,
    install_lang_plugins,
    install_protoc,
    is_google_protos_installed,
    is_protoc_installed,
    protoc_cmd_path,
    protoc_manager_dir,
    remove_protoc,
)
from proman.languages import PromanError, languages_from_comma_separated_list


def _run_generators(langs: str, in_path: str, out_path: str, grpc: bool) -> None:
    if not is_google_protos_installed():
        try:
            install_google_protos()
        except PromanError as err:
            raise PromanError(f"error installing google protos: {err}") from err

    try:
        targets = languages_from_comma_separated_list(langs)
    except PromanError as err:
        raise PromanError(f"error getting languages to generate: {err}") from err

    for language in targets:
        try:
            argv = language.cmd_for_gen_source(
                protoc_cmd_path(), google_protos_src_dir(), in_path, out_path, grpc
            )
        except PromanError as err:
            raise PromanError(f"error getting command to execute: {err}") from err
        try:
            result = subprocess.run(
                argv, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=False
            )
        except OSError as err:
            raise PromanError(f"error running command {' '.join(argv)}\n{err}:\n ") from err
        if result.returncode != 0:
            output = result.stdout.decode(errors="replace")
            raise PromanError(
                f"error running command {' '.join(argv)}\n"
                f"exit status {result.returncode}:\n {output}"
            )
    print("generated succesfully")


def generate(langs: str, in_folder: str, out_folder: str, add: str = "", grpc: bool = False) -> None:
    """Generate sources for each language in ``langs`` from ``in_folder`` into ``out_folder``.

    Installs protoc, the language plugins and the Google protos when missing.
    ``add`` is accepted for extra protoc arguments but is not passed on.
    """
    in_path = os.path.abspath(in_folder)
    out_path = os.path.abspath(out_folder)

    try:
        os.chdir(protoc_manager_dir())
    except OSError as err:
        raise PromanError(
            f"error changing directory to protoc manager directory: {err}"
        ) from err

    fresh_install = not is_protoc_installed()
    try:
        if fresh_install:
            print("protoc not found locally")
            try:
                install_protoc()
            except (PromanError, OSError) as err:
                raise PromanError(f"error installing protoc: {err}") from err
            install_lang_plugins()
        _run_generators(langs, in_path, out_path, grpc)
    except Exception:
        if fresh_install:
            try:
                remove_protoc()
            except OSError:
                print("error removing protoc")
        raise