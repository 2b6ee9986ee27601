"""Set up protoc and its Go and Dart plugins, and generate sources from .proto files."""

__version__ = "0.0.1"