"""The project configuration file read by ``proman gen``."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass

from proman.languages import PromanError

CONFIG_FILE = "./.proman"

# (attribute, JSON key, type)
_FIELDS = (
    ("language", "language", str),
    ("input_folder", "inputFolder", str),
    ("output_folder", "outputFolder", str),
    ("should_generate_grpc_stubs", "shouldGenerateGrpcStubs", bool),
)


@dataclass
class Config:
    """Defaults for the ``gen`` command."""

    language: str = ""
    input_folder: str = ""
    output_folder: str = ""
    should_generate_grpc_stubs: bool = False

    def to_json(self) -> str:
        """Serialise to the compact JSON stored in the config file."""
        return json.dumps(
            {key: getattr(self, attr) for attr, key, _ in _FIELDS},
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> Config:
        """Parse a config; unknown keys are ignored and missing ones default."""
        try:
            data = json.loads(text)
        except ValueError as err:
            raise PromanError(str(err)) from err
        if not isinstance(data, dict):
            raise PromanError("config must be a JSON object")
        values = {}
        for attr, key, kind in _FIELDS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, kind):
                raise PromanError(f"field {key} must be of type {kind.__name__}")
            values[attr] = value
        return cls(**values)


def read_config(path: str | os.PathLike[str] = CONFIG_FILE) -> Config | None:
    """Read the config file, or return None when there is none."""
    try:
        with open(path, "rb") as fh:
            raw = fh.read()
    except FileNotFoundError:
        return None
    except OSError as err:
        raise PromanError(f"failed to read config file: {err}") from err
    try:
        return Config.from_json(raw)
    except PromanError as err:
        raise PromanError(f"failed to unmarshal config file: {err}") from err


def init_config(path: str | os.PathLike[str] = CONFIG_FILE) -> None:
    """Write an empty config file; refuse to overwrite an existing one."""
    if os.path.exists(path):
        raise PromanError("config file already exists")
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o777)
        with os.fdopen(fd, "w") as fh:
            fh.write(Config().to_json())
    except OSError as err:
        raise PromanError(f"failed to write config file: {err}") from err