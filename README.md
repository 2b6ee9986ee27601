# proman

`proman` is a command-line tool that simplifies working with Protocol Buffers:

* it downloads the latest protobuf compiler (`protoc`) release for your
  platform,
* it installs the `protoc` plugins of the language toolchains you have,
* it generates source files from a folder of `.proto` files.

Supported languages: `go`, `dart`.

## Installation

```
pip install .
```

This installs the `proman` command. There are no third-party dependencies.

## Usage

Generate sources from the `.proto` files in a folder:

```
proman gen --lang go --in ./protos --out ./gen
```

Options of `gen`:

* `--lang`, `-l`: comma-separated languages, e.g. `go,dart`.
* `--in`, `-i`: folder holding the `.proto` files (only files directly in it
  are used).
* `--out`, `-o`: folder that receives the generated files.
* `--grpc`: also generate gRPC stubs.
* `--add`, `-a`: accepted, but currently not passed on to `protoc`.

`gen` works inside a `protocmanager` folder in your user configuration
directory (`%APPDATA%` on Windows, `~/Library/Application Support` on macOS,
`$XDG_CONFIG_HOME` or `~/.config` elsewhere). That folder must exist before
the first run. When no working `protoc` is found there, `gen` downloads the
latest release into it and installs the plugins of every installed language
toolchain (`go install ...` for Go, `dart pub global activate protoc_plugin`
for Dart). If the well-known Google proto definitions are missing, the
protobuf repository is cloned into that folder with `git`. If setting up a
fresh `protoc` or generating fails, the freshly installed `protoc` is removed
again so the next run starts over.

The plugins are looked up on `PATH` first, then in their usual install
locations (`GOBIN`, `GOPATH/bin` or `~/go/bin` for `protoc-gen-go`; the pub
cache for `protoc-gen-dart`; `./bin` for both).

On failure the error is printed and the command exits with status 1.

### Project configuration

Instead of passing flags every time, create a `.proman` file in the current
directory:

```
proman cfg init
```

This writes a JSON file with the keys `language`, `inputFolder`,
`outputFolder` and `shouldGenerateGrpcStubs`; it refuses to overwrite an
existing file. Fill them in, then run `proman gen`. Options given on the
command line take precedence over the file; empty values in the file are
ignored.

### Other commands

```
proman version    # print the version
proman rm         # remove the installed protoc so it is reinstalled next time
```

## Use from Python

* `proman.manager.generate(langs, in_folder, out_folder, add="", grpc=False)`
  does what `proman gen` does.
* `proman.config.read_config()` and `proman.config.init_config()` read and
  create the `.proman` file; `proman.config.Config` holds its fields.
* `proman.finders.find_protoc_gen_go()`, `find_protoc_gen_dart()` and
  `find_protoc_gen_ts()` return the absolute path of a plugin or raise
  `proman.languages.PromanError`.

## Limitations

* Only Go and Dart can be generated. A lookup for `protoc-gen-ts` exists, but
  there is no TypeScript target.
* Extra `protoc` arguments given with `--add` are not used.

## Requirements

* Network access for the first `gen` run.
* `git` on your `PATH`, for fetching the Google proto definitions.
* The toolchain of each language you generate for (`go`, `dart`), so its
  `protoc` plugin can be installed and found.