# latren

Building blocks for a small game engine. It is plain Python and has no
third-party dependencies.

## What is in it

- **`latren.version`**: `VersionInfo`, `BuildType`, `get_build_version()`,
  `get_build_type()` and `format_version(version=None, build_type=None)`.
  `format_version` returns strings such as `v0.1 [Release]`.
- **`latren.input`**: `KeyInputListener` records key presses and releases.
  The changes become visible when `poll()` is called. Query a key with
  `state(key)`, `is_down`, `is_pressed_down` and `is_released`. Call
  `update_states()` to turn `PRESSED_DOWN` into `DOWN` and `RELEASED` into `UP`.
  `InputSystem` is a dataclass. It holds a keyboard listener, a mouse-button
  listener and the pending flags and values shared between a window thread and
  a game thread. Each of those is kept in a lock-guarded `Atomic`, read with
  `get()` and written with `set()`.
- **`latren.paths`**: a `ResourcePath` holds a path string that may contain
  `${name}` placeholders.
  - `parsed_str()` and `parsed()` substitute each placeholder from a global
    table of path variables.
  - An unknown variable logs a warning and expands to an empty string.
  - The table starts with `cwd`, the working directory.
  - Change the table with `set_global_path_var` and read it with
    `get_global_path_var` and `list_global_path_vars`.
- **CFG files**: a configuration format based on indentation.
  - **`latren.cfgfields`**: the field tree (`CFGField`, `CFGObject`, `CFGFieldType`),
    `parse_type_annotation`, `is_valid_type` and `new_field`.
  - **`latren.cfgparse`**: `parse(text)` returns the root `CFGObject`. It raises
    `CFGSyntaxError` on malformed input.
  - **`latren.cfgvalidate`**: `validate(root, template)` and
    `load(text, template)` check a tree against a `CFGFileTemplate` made of
    `CFGFieldSpec` entries.
    - Integers are cast to floats where floats are expected.
    - Missing optional fields are created with default values.
    - Mismatches raise `CFGValidationError`.
  - **`latren.cfgdump`**: `dump(root, formatting=None)` writes a tree back out
    as text. `Formatting` chooses the quote style (`StringLiteral`) and the
    indent width of arrays.
- **`latren.serializablestruct`**: `SerializableStruct` holds named, typed
  members and comment or blank-line hints for its written form.
  - Supported member types are `str`, `int`, `bool`, `float`, `VEC2` and `IVEC2`.
  - `save_config(path, config)` writes a struct as CFG text.
  - `load_config(path, config)` reads a struct from CFG text. If the file
    cannot be read or parsed, it writes the current values to that path and
    returns `False`.
- **`latren.imports`**: reads the annotated import lists of an imports CFG
  file, such as `textures: [Texture] =`.
  - The lists become `Imports` holding `Import` or `ShaderImport` records.
  - The readers are `list_imports`, `list_shader_imports` and `index_imports`.
  - `imports_template()` gives the custom types such a file may use.

## CFG syntax in brief

```
# a comment
width = 1280
title = 'My game'
size = 1.5 2.5            # several values make a struct
fonts: [Font] =           # an array; its items are indented below
    main = 'fonts/main.ttf' 24
```

- Strings may be quoted with `'` or `"`. A bare word also counts as a string.
- Inside quoted strings, `\q` stands for `"` and `\a` stands for `'`.
- Type annotations use `Str`, `Int` and `Flt`, with `{...}` for structs and
  `[...]` for arrays. Custom names are allowed and are resolved through a
  template's `types`.

## Installation

```
pip install .
```

## Example

```python
from latren.cfgdump import dump
from latren.cfgfields import CFGFieldType
from latren.cfgvalidate import CFGFieldSpec, CFGFileTemplate, load

template = CFGFileTemplate(fields=[CFGFieldSpec("width", [CFGFieldType.INTEGER])])
root = load("width = 1280\ntitle = 'My game'\n", template)
print(root.find("width").value)   # 1280
print(dump(root), end="")
```

```python
from latren.serializablestruct import SerializableStruct, load_config

video = SerializableStruct()
video.add_comment("Video settings")
video.add_member("width", int, 1280)
video.add_member("fullscreen", bool)
load_config("video.cfg", video)   # writes the defaults if the file is missing
print(video["width"])
```

## What it does not do

- There is no window, renderer, audio or physics.
- There is no command-line program.
- `latren.imports` only lists what an imports file asks for. It does not load
  textures, shaders, models, fonts, audio or stages.
- `InputSystem` and `KeyInputListener` hold input state. They do not read it
  from any device.

## Running the tests

```
pip install .[test]
pytest
```