# rangerforest

Building blocks for a random forest implementation, in plain Python with
no third-party dependencies: the configuration enumerations, the data
matrix a forest is grown on, small utilities, and parsing and checking of
command-line style options.

## Modules

- `rangerforest.constants` – the enumerations `TreeType`, `MemoryMode`,
  `ImportanceMode`, `SplitRule` and `PredictionType`, plus default
  settings such as `DEFAULT_NUM_TREE` (500) and `DEFAULT_MINPROP` (0.1).
- `rangerforest.helpers` – range splitting, time formatting, ordering,
  string splitting and binary vector storage.
- `rangerforest.data` – the abstract `Data` class and `ArrayData`, an
  in-memory implementation holding column-major lists of floats.
- `rangerforest.options` – `parse_arguments`, the `Arguments` dataclass
  and `ArgumentError`.
- `rangerforest.checks` – `check_arguments`, `help_text` and
  `version_text`.

## Helpers

```python
from rangerforest.helpers import (
    beautify_time,
    equal_split,
    order,
    round_to_next_multiple,
    split_string,
)

equal_split(0, 9, 1)              # [0, 10]
equal_split(2, 12, 5)             # [2, 5, 7, 9, 11, 13]
round_to_next_multiple(5, 4)      # 8
split_string("abc,def,ghi", ",")  # ["abc", "def", "ghi"]
beautify_time(2317)               # "38 minutes, 37 seconds"
order([1.5, 3.2, 1.1], False)     # [2, 0, 1]
```

`write_vector` / `read_vector` and `write_matrix` / `read_matrix` store
one- and two-dimensional sequences in a little-endian, length-prefixed
binary layout; the element type is a `struct` format character such as
`"d"` or `"i"`. Anything written can be read back unchanged.

## Data

```python
from rangerforest.data import ArrayData

data = ArrayData(
    x=[1.0, 2.0, 2.0, 5.0, 4.0, 5.0],   # column-major: two columns of three rows
    y=[0.0, 1.0, 1.0],
    variable_names=["a", "b"],
    num_rows=3,
    num_cols=2,
)
data.sort()
data.variable_id("b")                  # 1
data.index(2, 0)                       # 1: position of 2.0 among [1.0, 2.0]
data.num_unique_data_values(1)         # 2
data.all_values([0, 1, 2], 0, 0, 3)    # [1.0, 2.0]
data.min_max_values([0, 1, 2], 1, 0, 3)  # (4.0, 5.0)
```

`Data.load_from_file(filename, dependent_variable_names)` reads a file
with a header line; the separator is a comma if the header holds one,
otherwise a semicolon if it holds one, otherwise whitespace. Columns named
in `dependent_variable_names` go to `y`, the others to `x`. Whitespace
files with too many or too few numeric values in a row raise
`ValueError`. The return value is true if some value could not be stored
exactly (never for `ArrayData`).

Column ids at or beyond `num_cols` refer to permuted copies of the
columns, using the sample order set by `permute_sample_ids(rng)` with a
`random.Random`. Packed genotype columns (four 2-bit values per byte) can
be attached with `add_snp_data`; `order_snp_levels` orders their levels
by mean response, and `set_snp_order` sets an order directly.
`set_unordered_variables` marks named variables as unordered, queried with
`is_ordered_variable`.

## Options

```python
from rangerforest.options import ArgumentError, parse_arguments
from rangerforest.checks import check_arguments, help_text, version_text

args = parse_arguments(["--file", "data.csv", "--depvarname", "y", "--ntree", "100"])
check_arguments(args)
```

`parse_arguments` accepts long options (unique abbreviations too, and
`--name=value`) and bundled short options. Arguments that are not options
are kept in `args.extra_arguments`, unknown options in
`args.unrecognized`. Parsing stops at `--help` or `--version`, setting
`args.show_help` or `args.show_version`. Invalid values, such as a
non-positive `--ntree` or a `--fraction` outside (0, 1], raise
`ArgumentError`.

`check_arguments` raises `ArgumentError` for missing required settings
and invalid combinations. With `--predict FILE` it reads the tree type
from that forest file, raising `OSError` if it cannot. When
regularization coefficients are given it prints a warning and sets
`nthreads` to 1.

`help_text(program)` returns the usage text; `version_text()` returns
`"rangerforest version: 0.12.4\n"`.

## What this package does not do

It does not grow trees, predict, compute prediction error or variable
importance, or write forests, predictions or importance files. It has no
command-line program: the option parsing and checking are library
functions only.

## Running the tests

The test suite uses pytest, available through the `test` extra.