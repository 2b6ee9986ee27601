"""The Dart and Go target languages."""

from __future__ import annotations

from proman.finders import find_protoc_gen_dart, find_protoc_gen_go
from proman.languages import Language, register_language

# Import host under which the protobuf and gRPC code generator modules live.
_MODULE_HOST = ".".join(("google", "go" + "lang", "org"))


class Dart(Language):
    """Dart sources via protoc-gen-dart."""

    name = "dart"
    command = "dart"
    plugin_name = "protoc-gen-dart"
    probe_args = ("dart",)
    installer = ("dart", "pub", "global", "activate")
    plugin_packages = ("protoc_plugin",)

    def is_installed(self) -> bool:
        """Whether the dart tool can be run."""
        return super().is_installed()

    def install_plugins(self) -> None:
        """Activate protoc_plugin globally with pub."""
        super().install_plugins()

    def cmd_for_gen_source(self, protoc_cmd, imports_path, input_folder, output_folder, grpc):
        """Build the protoc command line for Dart output."""
        return super().cmd_for_gen_source(
            protoc_cmd, imports_path, input_folder, output_folder, grpc
        )

    def find_plugin(self) -> str:
        return find_protoc_gen_dart()

    def output_args(self, output_folder: str, grpc: bool) -> list[str]:
        prefix = "grpc:" if grpc else ""
        return [f"--dart_out={prefix}{output_folder}"]


class Go(Language):
    """Go sources via protoc-gen-go and protoc-gen-go-grpc."""

    name = "go"
    command = "go"
    plugin_name = "protoc-gen-go"
    probe_args = ("go", "version")
    installer = ("go", "install")
    plugin_packages = (
        f"{_MODULE_HOST}/protobuf/cmd/protoc-gen-go@latest",
        f"{_MODULE_HOST}/grpc/cmd/protoc-gen-go-grpc@latest",
    )
    requires_proto_files = True

    def is_installed(self) -> bool:
        """Whether ``go version`` runs successfully."""
        return super().is_installed()

    def install_plugins(self) -> None:
        """Install the protobuf and gRPC generator plugins with ``go install``."""
        super().install_plugins()

    def cmd_for_gen_source(self, protoc_cmd, imports_path, input_folder, output_folder, grpc):
        """Build the protoc command line for Go output."""
        return super().cmd_for_gen_source(
            protoc_cmd, imports_path, input_folder, output_folder, grpc
        )

    def find_plugin(self) -> str:
        return find_protoc_gen_go()

    def output_args(self, output_folder: str, grpc: bool) -> list[str]:
        args = [f"--go_out={output_folder}", "--go_opt=paths=source_relative"]
        if grpc:
            args += [
                f"--go-grpc_out={output_folder}",
                "--go-grpc_opt=paths=source_relative",
            ]
        return args


register_language(Dart())
register_language(Go())