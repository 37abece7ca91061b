# gintonic

Building blocks for a small HTTP framework. Each module can be used by itself.

## What is in the package

- **`gintonic.mode`**: a process-wide run mode, one of `debug`, `release` or
  `test`. `set_mode(value)` sets it and raises `ValueError` for an unknown
  name. An empty value picks `test` while a pytest test is running and
  `debug` otherwise. `mode()` returns the current name and `is_debugging()`
  tells whether it is `debug`. At import, the mode is taken from the
  `GIN_MODE` environment variable.
- **`gintonic.path`**: `clean_path(p)` returns the canonical form of a URL
  path. It collapses repeated slashes, drops `.` elements and resolves `..`
  elements without climbing above the root. A trailing slash is kept.
- **`gintonic.response_writer`**:
  - `Header` is a case-insensitive, multi-valued header map with `get`,
    `get_all`, `set`, `add` and `set_all`.
  - `ResponseRecorder` is an in-memory response target. It records `code`,
    `header` and `body`, and `text` gives the body decoded.
  - `ResponseWriter` wraps a target. It holds the status back until the first
    write (`write_header`, `write_header_now`), and it tracks `status`, `size`
    and `written`. It also passes `flush`, `hijack`, `close_notify` and
    `pusher` through to the target when the target supports them.
- **`gintonic.render`**: renderers with `render(writer)` and
  `write_content_type(writer)`. A renderer sets `Content-Type` only if the
  writer has none yet.
  - `render.base` holds the `Render` interface and these renderers:
    - `Data`: raw bytes.
    - `String`: printf-style text. The format is applied only when arguments
      are given.
    - `Reader`: copies a stream to the response, with optional
      `Content-Length` and extra headers.
    - `Redirect`: a redirect. Status codes outside 300–308, other than 201,
      raise `ValueError`.
  - `render.json_render` holds the JSON renderers:
    - `JSON`: compact JSON with sorted keys and HTML-safe escapes.
    - `IndentedJSON`: JSON indented by four spaces.
    - `SecureJSON`: puts a guard prefix before top-level arrays.
    - `JsonpJSON`: wraps the JSON in a callback call. `js_escape_string()`
      escapes the callback name.
    - `AsciiJSON`: writes every non-ASCII character as a `\uXXXX` escape.
    - `PureJSON`: leaves HTML characters unescaped and ends with a newline.
  - `render.html` holds the Jinja2 templates, loaded with `load_templates()`
    and configured with `Delims`:
    - `HTMLProduction`: templates loaded once.
    - `HTMLDebug`: templates reloaded from files or a glob on every
      `instance()`.
    - `HTML`: the renderer that `instance()` returns.
  - `render.codecs` holds the renderers for other formats:
    - `MsgPack` and `write_msgpack()`.
    - `ProtoBuf`: any object with `SerializeToString()`.
    - `TOML`: mappings only.
    - `XML`: an element tree, or a mapping written as `<map>…</map>`.
    - `YAML`.
- **`gintonic.logger`**: access-log formatting.
  - `LogFormatterParams` describes one request and gives the ANSI colours for
    its status code and method.
  - `default_log_formatter()` builds the standard log line.
  - `format_duration()` writes durations such as `1.5ms` or `2h3m4.5s`.
  - `LoggerConfig` picks the formatter and output stream (standard output by
    default) and the paths or requests to skip. Its `emit()` writes the line.
  - Colours are controlled with `force_console_color()`,
    `disable_console_color()` and `reset_console_color()`, and
    `console_color_mode()` returns the current `ColorMode`.
- **`gintonic.recovery`**: builds the report for a failure caught in a
  handler. The helpers are `stack()`, `source()`, `function_name()`,
  `time_format()` and `mask_authorization()`, which hides `Authorization`
  values in a request dump. `format_panic_report()` builds the full report:
  short for a broken client connection, with the request headers only in
  debug mode.
- **`gintonic.proxies`**:
  - `parse_ip()` parses one address.
  - `prepare_trusted_cidrs()` turns addresses and CIDRs into networks.
  - `TrustedProxies` holds the trusted networks, trusting everything by
    default. `set()` changes them, and `None` turns trust off. `is_trusted()`
    checks an address and `is_unsafe()` tells whether all addresses are
    trusted. `validate_header()` picks the client address out of an
    `X-Forwarded-For` style header.
- **`gintonic.redirects`**:
  - `HandlersChain` is a list whose `last()` is the main handler.
  - `RouteInfo` describes a route.
  - `safe_forwarded_prefix()` and `trailing_slash_target()` compute
    trailing-slash redirects.
  - `redirect_status()` gives 301 for GET and 307 for any other method.
  - `serve_error()` finishes a 404/405-style response with a plain-text
    default body when the handlers wrote nothing.

## Installation

```
pip install gintonic
```

Python 3.10 or later is required.

## Examples

Cleaning paths:

```python
from gintonic.path import clean_path

clean_path("/abc/def/../ghi/../jkl")   # "/abc/jkl"
clean_path("abc//./../def")            # "/def"
clean_path("")                         # "/"
```

Choosing the run mode:

```python
from gintonic.mode import set_mode, mode

set_mode("release")
mode()            # "release"
set_mode("bad")   # raises ValueError
```

Rendering into an in-memory response:

```python
from gintonic.response_writer import ResponseRecorder
from gintonic.render.json_render import JSON, SecureJSON

recorder = ResponseRecorder()
JSON({"foo": "bar"}).render(recorder)
recorder.text                          # '{"foo":"bar"}'
recorder.header.get("Content-Type")    # "application/json; charset=utf-8"

recorder = ResponseRecorder()
SecureJSON("while(1);", [1, 2]).render(recorder)
recorder.text                          # "while(1);[1,2]"
```

Trusting only some proxies:

```python
from gintonic.proxies import TrustedProxies

proxies = TrustedProxies()
proxies.set(["192.168.0.0/16", "172.16.0.1"])
proxies.validate_header("20.20.20.20, 192.168.1.7")   # "20.20.20.20"
```

Trailing-slash redirects:

```python
from gintonic.redirects import trailing_slash_target, redirect_status

trailing_slash_target("/foo")    # "/foo/"
trailing_slash_target("/foo/")   # "/foo"
redirect_status("POST")          # 307
```

## What the package does not do

There is no router, engine, request context or HTTP server here, and no
command to run. Nothing matches requests to routes or runs handler chains.
Nothing listens on a socket. The logger formats and writes lines, and the
recovery module builds reports, but neither is wired in as middleware. Those
pieces are left to the application that uses these building blocks.

## Running the tests

```
pip install "gintonic[test]"
pytest
```