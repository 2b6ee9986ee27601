[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proman"
version = "0.0.1"
description = "Set up protoc and its language plugins, and generate sources from .proto files"
requires-python = ">=3.10"
dependencies = []
keywords = ["protobuf", "protoc", "grpc", "code generation", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
proman = "proman.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["proman"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
