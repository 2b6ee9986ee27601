"""The proman command line."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from proman.config import init_config, read_config
from proman.install import remove_protoc
from proman.languages import LANGUAGES, PromanError
from proman.manager import generate

VERSION = "v0.0.1"

_INTRO = """protocmanager is cli tool to simplify the process of 
\t* setting up your machine with protobuff compiler(protoc)
\t* installing compiler's language specific plugins
\t* generating source files from proto files

protocmanager supports the following languages:
"""


def description() -> str:
    """Help text naming every supported language."""
    return _INTRO + ", ".join(lang.command for lang in LANGUAGES.values())


def _run_gen(args: argparse.Namespace) -> None:
    try:
        cfg = read_config()
    except PromanError as err:
        raise PromanError(f"error reading config file: {err}") from err

    lang, in_folder, out_folder, grpc = args.lang, args.in_folder, args.out_folder, args.grpc
    if cfg is not None:
        if lang is None and cfg.language:
            lang = cfg.language
        if in_folder is None and cfg.input_folder:
            in_folder = cfg.input_folder
        if out_folder is None and cfg.output_folder:
            out_folder = cfg.output_folder
        if grpc is None:
            grpc = cfg.should_generate_grpc_stubs

    missing = [
        f"--{flag} is required"
        for flag, value in (("lang", lang), ("in", in_folder), ("out", out_folder))
        if value is None
    ]
    if missing:
        raise PromanError("\n".join(missing))
    generate(lang, in_folder, out_folder, args.add or "", bool(grpc))


def _run_version(args: argparse.Namespace) -> None:
    print(VERSION)


def _run_rm(args: argparse.Namespace) -> None:
    remove_protoc()


def _run_cfg_init(args: argparse.Namespace) -> None:
    init_config()


def build_parser() -> argparse.ArgumentParser:
    """The argument parser with the cfg, gen, version and rm commands."""
    parser = argparse.ArgumentParser(
        prog="proman",
        description=description(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    commands = parser.add_subparsers(title="commands")

    cfg = commands.add_parser("cfg", help="proman config related commands")
    cfg.set_defaults(handler=lambda _args: cfg.print_help())
    cfg_commands = cfg.add_subparsers(title="commands")
    cfg_init = cfg_commands.add_parser("init", help="initializes proman config file")
    cfg_init.set_defaults(handler=_run_cfg_init)

    gen = commands.add_parser("gen", help="generates source files from proto files")
    gen.add_argument("--lang", "-l", help="comma separated languages to generate")
    gen.add_argument("--in", "-i", dest="in_folder", help="folder containing proto files")
    gen.add_argument(
        "--out", "-o", dest="out_folder", help="folder to output the generated source files"
    )
    gen.add_argument("--grpc", action="store_true", default=None)
    gen.add_argument(
        "--add",
        "-a",
        help='additional commands to pass to protoc, should be in format '
        '"ARG1=ARG_VALUE ARG2=ARG2_VALUE"',
    )
    gen.set_defaults(handler=_run_gen)

    commands.add_parser("version").set_defaults(handler=_run_version)
    commands.add_parser(
        "rm",
        help="removes any installed protoc, so it can be reinstalled in the next generation",
    ).set_defaults(handler=_run_rm)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run proman; print any error and return a non-zero status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0
    try:
        handler(args)
    except (PromanError, OSError) as err:
        print(err)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())