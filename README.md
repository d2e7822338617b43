# jsonnet-core

Runtime building blocks of a Jsonnet interpreter, in plain Python with no
third-party dependencies.

## Modules

### `jsonnet_core.errors`

- `ErrorKind`: an enum of every evaluation error kind. Each member holds a
  message template. `ErrorKind.format(*args)` renders it. Some kinds prepare
  their arguments first. Empty strings are shown as `"" (empty string)`,
  similar names are listed, and function signatures are rendered.
- `JsonnetError`: the exception raised for evaluation failures. It carries
  `kind`, `details`, `message` and `trace`, which is a list of
  `StackTraceElement(desc, location)`. `add_frame(desc, location=None)` appends
  a frame and returns the error. `str()` of the error gives the message followed
  by one tab-indented line per frame.
- Helpers:
  - `jaro_winkler(a, b)` gives a similarity from 0.0 to 1.0.
  - `suggest_similar(candidates, key)` returns the candidates scoring at least
    0.8, best first.
  - `format_found(names, what)` renders the list of similar names.
  - `format_signature(signature)` renders a signature given as
    `(name or None, has_default)` pairs.

### `jsonnet_core.pending`

- `Pending`: a cell that is filled once. `fill` raises `RuntimeError` if the
  cell is already filled. `unwrap` raises `RuntimeError` if it is still empty.
  `is_filled` reports which of the two holds.
- `Thunk(compute)`: a value computed on first `evaluate()`.
  - A result is cached.
  - A `JsonnetError` is cached and raised again on later calls.
  - Any other exception leaves the thunk ready to try again.
  - Evaluating a thunk from inside its own computation raises
    `ErrorKind.INFINITE_RECURSION_DETECTED`.
- `evaluated(value)` and `errored(error)` build thunks that are already settled.

### `jsonnet_core.context`

- `Context`: local bindings plus the `dollar`, `sup` and `this` objects.
  - `binding(name)` returns the thunk bound to `name`. For an unknown name it
    raises `VARIABLE_IS_NOT_DEFINED` and lists similar names.
  - `extend(bindings, dollar, sup, this)` returns a new context layered over
    the current one. Arguments left as `None` keep the current values.
  - `with_var(name, value)` adds one evaluated variable.
  - `into_future(pending)` fills a `Pending` with the context.
  - The `state` property raises `RuntimeError` when the context was built
    without a state.
- `ContextBuilder`: collects bindings and then `build()`s a context.
  `ContextBuilder.extending(parent)` makes a builder whose result extends
  `parent`. `bind` raises `ValueError` when the same name is bound twice.

### `jsonnet_core.arrays`

`ArrValue` is the abstract array interface. It supports `len()` and iteration,
plus these methods:

- `get` and `get_lazy` raise `IndexError` when out of bounds.
- `get_cheap` and `is_cheap`.
- `iter_lazy`.
- `iter_cheap` returns `None` for arrays that are not cheap.
- `filter`.

The storage kinds are `EagerArray`, `LazyArray`, `ExprArray`, `RangeArray`,
`BytesArray` and `CharArray`. The constructors are `empty`, `eager`, `lazy`,
`expr_array(items, evaluator)`, `range_exclusive`, `range_inclusive`,
`byte_array` and `char_array`. Numbers from ranges and byte arrays come back as
floats.

`ptr_eq(a, b)` tells whether two arrays are known to share storage.

### `jsonnet_core.array_views`

These functions return views over other arrays:

- `extended(a, b)` concatenates. It copies when the total is at most 100
  elements and returns an `ExtendedArray` view above that.
- `slice_array(array, start, end, step)` returns `None` when the slice selects
  nothing.
- `reversed_array(array)` reverses. Reversing a reversed view returns the
  original array.
- `map_array(array, mapper)` applies `mapper` to each element once, when that
  element is first read.
- `repeated(data, repeats)` repeats the array.

### `jsonnet_core.operators`

`UnaryOp`, `BinaryOp`, `value_type`, `values_equal`, `evaluate_unary_op`,
`evaluate_add_op`, `evaluate_mod_op`, `evaluate_compare_op` (returns -1, 0 or 1)
and `evaluate_binary_op`.

Values are represented as follows:

| Jsonnet type | Python value |
|---|---|
| null | `None` |
| boolean | `bool` |
| number | `int` or `float` |
| string | `str` |
| array | `ArrValue` |
| object | a mapping |
| function | a callable |

Operator behaviour:

- `+` concatenates strings, stringifying the other side. It also concatenates
  arrays, merges objects (right side wins) and adds numbers.
- `%` on numbers is `math.fmod`. On a string it is printf-style formatting,
  with an array, mapping or single value as arguments.
- Bitwise operators and shifts work on 32-bit integers.
- These cases raise `JsonnetError`:
  - division or remainder by zero
  - shifting by a negative amount
  - a non-finite arithmetic result
  - an operator applied to unsupported types

### `jsonnet_core.options`

- External variables:
  - `parse_ext_str("name=value")` returns an `ExtVar`. The value may itself
    contain `=`. Given only `name`, it reads the environment variable of that
    name and raises `ValueError` if the variable is unset.
  - `parse_ext_file("name=path")` reads the value from the file at `path`.
- `collect_tla_args(strs, str_files, codes, code_files)` returns a dict of
  `TlaArg`. Code arguments are marked `is_code` and named
  `<top-level-arg:NAME>`.
- `library_paths(jpaths, environ)` lists the `-J` paths right-most first,
  followed by the entries of `JSONNET_PATH`.
- `ManifestFormatName` and `TraceFormatName` are the format enums.
- `ManifestOptions.line_padding_or_default()` gives 3 for JSON and 2 for
  YAML/TOML. It gives `None` for string output.
- `TraceOptions` defaults to the compact format, which has padding 4, with at
  most 20 frames.
- `build_argument_parser()` returns an `argparse.ArgumentParser` with the
  interpreter's options. `ManifestOptions.from_namespace` and
  `TraceOptions.from_namespace` read from the parsed namespace.

## Example

```python
from jsonnet_core.arrays import range_inclusive
from jsonnet_core.array_views import reversed_array
from jsonnet_core.operators import BinaryOp, evaluate_binary_op
from jsonnet_core.options import parse_ext_str

list(reversed_array(range_inclusive(1, 3)))   # [3.0, 2.0, 1.0]
evaluate_binary_op("n=", BinaryOp.ADD, 5)      # "n=5"

ext = parse_ext_str("name=value=with=equals")
# ext.name == "name", ext.value == "value=with=equals"
```

## What this package does not do

There is no Jsonnet parser and no evaluator of Jsonnet source. Expression
arrays take an evaluator that you supply. There is no standard library and no
import resolution.

Output formats are named in `ManifestOptions`, but no JSON, YAML or TOML
writer is provided. The only rendering is the compact one used when operators
turn a value into a string.

No command is installed. `build_argument_parser` builds the parser, but nothing
runs a program from it.

## Tests

Install the `test` extra and run `pytest`.