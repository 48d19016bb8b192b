"""Tabular input data with per-column index tables and packed SNP columns."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from bisect import bisect_left
from typing import Iterator, Sequence

from .constants import SNP_MASK, SNP_OFFSET
from .helpers import order, round_to_next_multiple, split_string


def _leading_numbers(line: str) -> Iterator[float]:
    for token in line.split():
        try:
            yield float(token)
        except ValueError:
            return


def _parse_field(token: str) -> float:
    words = token.split()
    if not words:
        return 0.0
    try:
        return float(words[0])
    except ValueError:
        return 0.0


class Data(ABC):
    """Base class for the data a forest is grown on.

    Columns at or beyond num_cols refer to permuted copies of the columns,
    used for the corrected impurity importance.
    """

    def __init__(self) -> None:
        self.variable_names: list[str] = []
        self.num_rows = 0
        self.num_rows_rounded = 0
        self.num_cols = 0
        self.snp_data: bytes | None = None
        self.num_cols_no_snp = 0
        self.external_data = True
        self.index_data: list[int] = []
        self.unique_data_values: list[list[float]] = []
        self._max_unique = 0
        self.ordered_flags: list[bool] = []
        self.permuted_sample_ids: list[int] = []
        self.snp_order: list[list[int]] = []
        self.order_snps = False

    @abstractmethod
    def get_x(self, row: int, col: int) -> float:
        """Value of an independent variable."""

    @abstractmethod
    def get_y(self, row: int, col: int) -> float:
        """Value of a dependent variable."""

    @abstractmethod
    def reserve_memory(self, y_cols: int) -> None:
        """Allocate storage for num_rows rows, num_cols x columns and y_cols y columns."""

    @abstractmethod
    def set_x(self, col: int, row: int, value: float) -> bool:
        """Store an x value; return True if it could not be stored exactly."""

    @abstractmethod
    def set_y(self, col: int, row: int, value: float) -> bool:
        """Store a y value; return True if it could not be stored exactly."""

    def variable_id(self, variable_name: str) -> int:
        try:
            return self.variable_names.index(variable_name)
        except ValueError:
            raise ValueError(f"Variable {variable_name} not found.") from None

    def add_snp_data(self, snp_data: bytes, num_cols_snp: int) -> None:
        """Attach packed genotype columns, four 2-bit values per byte."""
        self.num_cols = self.num_cols_no_snp + num_cols_snp
        self.num_rows_rounded = round_to_next_multiple(self.num_rows, 4)
        self.snp_data = bytes(snp_data)

    # Loading

    def load_from_file(self, filename: str, dependent_variable_names: Sequence[str]) -> bool:
        """Load a comma, semicolon or whitespace separated file with a header line.

        Returns True if some value could not be stored exactly.
        """
        try:
            with open(filename, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as err:
            raise OSError("Could not open input file.") from err

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self.num_rows = max(len(lines) - 1, 0)
        header = lines[0] if lines else ""
        body = lines[1:]

        if "," in header:
            result = self._load_separated(body, header, dependent_variable_names, ",")
        elif ";" in header:
            result = self._load_separated(body, header, dependent_variable_names, ";")
        else:
            result = self._load_whitespace(body, header, dependent_variable_names)

        self.external_data = False
        return result

    def _read_header(self, tokens: Sequence[str], dependent_variable_names: Sequence[str]) -> list[int]:
        dependent_ids = [0] * len(dependent_variable_names)
        for col, token in enumerate(tokens):
            is_dependent = False
            for i, name in enumerate(dependent_variable_names):
                if token == name:
                    dependent_ids[i] = col
                    is_dependent = True
            if not is_dependent:
                self.variable_names.append(token)
        self.num_cols = len(self.variable_names)
        self.num_cols_no_snp = self.num_cols
        self.reserve_memory(len(dependent_variable_names))
        return dependent_ids

    def _store(self, row: int, column: int, value: float, dependent_ids: Sequence[int]) -> bool:
        column_x = column
        for i, dep_id in enumerate(dependent_ids):
            if column == dep_id:
                return self.set_y(i, row, value)
            if column > dep_id:
                column_x -= 1
        return self.set_x(column_x, row, value)

    def _load_whitespace(self, body: Sequence[str], header: str,
                         dependent_variable_names: Sequence[str]) -> bool:
        dependent_ids = self._read_header(header.split(), dependent_variable_names)
        expected = self.num_cols + len(dependent_variable_names)
        error = False
        row = 0
        for row, line in enumerate(body):
            values = list(_leading_numbers(line))
            if len(values) > expected:
                raise ValueError(f"Could not open input file. Too many columns in row {row}.")
            if len(values) < expected:
                raise ValueError(
                    f"Could not open input file. Too few columns in row {row}. Are all values numeric?")
            for column, value in enumerate(values):
                error |= self._store(row, column, value, dependent_ids)
        self.num_rows = len(body)
        return error

    def _load_separated(self, body: Sequence[str], header: str,
                        dependent_variable_names: Sequence[str], separator: str) -> bool:
        dependent_ids = self._read_header(split_string(header, separator), dependent_variable_names)
        error = False
        for row, line in enumerate(body):
            for column, token in enumerate(split_string(line, separator)):
                error |= self._store(row, column, _parse_field(token), dependent_ids)
        self.num_rows = len(body)
        return error

    # Queries

    def all_values(self, sample_ids: Sequence[int], var_id: int, start: int, end: int) -> list[float]:
        """Sorted distinct values of a variable over sample_ids[start:end]."""
        if self.unpermuted_var_id(var_id) < self.num_cols_no_snp:
            return sorted({self.get_x(sample_id, var_id) for sample_id in sample_ids[start:end]})
        return [0.0, 1.0, 2.0]

    def min_max_values(self, sample_ids: Sequence[int], var_id: int, start: int,
                       end: int) -> tuple[float, float]:
        """Smallest and largest value of a variable over sample_ids[start:end]."""
        if not sample_ids:
            raise ValueError("No samples given.")
        low = high = self.get_x(sample_ids[start], var_id)
        for sample_id in sample_ids[start:end]:
            value = self.get_x(sample_id, var_id)
            low = min(low, value)
            high = max(high, value)
        return low, high

    def index(self, row: int, col: int) -> int:
        """Position of a value among the sorted distinct values of its column."""
        col_permuted = col
        if col >= self.num_cols:
            col = self.unpermuted_var_id(col)
            row = self.permuted_sample_id(row)
        if col < self.num_cols_no_snp:
            return self.index_data[col * self.num_rows + row]
        return self.snp(row, col, col_permuted)

    def _decode_snp(self, idx: int) -> int:
        code = ((self.snp_data[idx // 4] & SNP_MASK[idx % 4]) >> SNP_OFFSET[idx % 4]) - 1
        return code if 0 <= code <= 2 else 0

    def _snp_code(self, row: int, col: int) -> int:
        return self._decode_snp((col - self.num_cols_no_snp) * self.num_rows_rounded + row)

    def snp(self, row: int, col: int, col_permuted: int) -> int:
        """Genotype 0, 1 or 2 of a SNP column, mapped through the level order if set."""
        result = self._snp_code(row, col)
        if self.order_snps:
            if col_permuted >= self.num_cols:
                result = self.snp_order[col_permuted - 2 * self.num_cols_no_snp][result]
            else:
                result = self.snp_order[col - self.num_cols_no_snp][result]
        return result

    def unique_data_value(self, var_id: int, index: int) -> float:
        if var_id >= self.num_cols:
            var_id = self.unpermuted_var_id(var_id)
        if var_id < self.num_cols_no_snp:
            return self.unique_data_values[var_id][index]
        return float(index)

    def num_unique_data_values(self, var_id: int) -> int:
        if var_id >= self.num_cols:
            var_id = self.unpermuted_var_id(var_id)
        if var_id < self.num_cols_no_snp:
            return len(self.unique_data_values[var_id])
        return 3

    def sort(self) -> None:
        """Build, for every column, its distinct values and each row's index into them."""
        self.index_data = [0] * (self.num_cols_no_snp * self.num_rows)
        for col in range(self.num_cols_no_snp):
            column = [self.get_x(row, col) for row in range(self.num_rows)]
            unique_values = sorted(set(column))
            for row, value in enumerate(column):
                self.index_data[col * self.num_rows + row] = bisect_left(unique_values, value)
            self.unique_data_values.append(unique_values)
            self._max_unique = max(self._max_unique, len(unique_values))

    def order_snp_levels(self, corrected_importance: bool) -> None:
        """Order the genotype levels of each SNP by mean response."""
        if self.snp_data is None:
            return
        num_plain = self.num_cols - self.num_cols_no_snp
        num_snps = 2 * num_plain if corrected_importance else num_plain

        snp_order = []
        for i in range(num_snps):
            permuted = i >= num_plain
            col = i - num_plain if permuted else i
            sums = [0.0, 0.0, 0.0]
            counts = [0, 0, 0]
            for row in range(self.num_rows):
                sample = self.permuted_sample_id(row) if permuted else row
                value = self._decode_snp(col * self.num_rows_rounded + sample)
                sums[value] += self.get_y(row, 0)
                counts[value] += 1
            means = [total / count if count else float("nan") for total, count in zip(sums, counts)]
            snp_order.append(order(means, False))

        self.snp_order = snp_order
        self.order_snps = True

    def max_num_unique_values(self) -> int:
        if self.snp_data is None or self._max_unique > 3:
            return self._max_unique
        return 3

    def set_unordered_variables(self, unordered_variable_names: Sequence[str]) -> None:
        """Mark the named variables unordered; all others stay ordered."""
        flags = self.ordered_flags[: self.num_cols]
        flags.extend([True] * (self.num_cols - len(flags)))
        for name in unordered_variable_names:
            flags[self.variable_id(name)] = False
        self.ordered_flags = flags

    def is_ordered_variable(self, var_id: int) -> bool:
        if var_id >= self.num_cols:
            var_id = self.unpermuted_var_id(var_id)
        return self.ordered_flags[var_id]

    def permute_sample_ids(self, rng: random.Random) -> None:
        ids = list(range(self.num_rows))
        rng.shuffle(ids)
        self.permuted_sample_ids = ids

    def permuted_sample_id(self, sample_id: int) -> int:
        return self.permuted_sample_ids[sample_id]

    def unpermuted_var_id(self, var_id: int) -> int:
        return var_id - self.num_cols if var_id >= self.num_cols else var_id

    def set_snp_order(self, snp_order: Sequence[Sequence[int]]) -> None:
        self.snp_order = [list(levels) for levels in snp_order]
        self.order_snps = True


class ArrayData(Data):
    """Data held in column-major lists of floats."""

    def __init__(self, x: Sequence[float] | None = None, y: Sequence[float] | None = None,
                 variable_names: Sequence[str] | None = None, num_rows: int = 0,
                 num_cols: int = 0) -> None:
        super().__init__()
        self.x = [float(v) for v in x] if x is not None else []
        self.y = [float(v) for v in y] if y is not None else []
        if x is not None and len(self.x) != num_rows * num_cols:
            raise ValueError("Size of x does not match num_rows * num_cols.")
        if num_rows and len(self.y) % num_rows:
            raise ValueError("Size of y is not a multiple of num_rows.")
        self.variable_names = list(variable_names or [])
        self.num_rows = num_rows
        self.num_cols = num_cols
        self.num_cols_no_snp = num_cols

    def get_x(self, row: int, col: int) -> float:
        if col >= self.num_cols:
            col = self.unpermuted_var_id(col)
            row = self.permuted_sample_id(row)
        if col < self.num_cols_no_snp:
            return self.x[col * self.num_rows + row]
        return float(self._snp_code(row, col))

    def get_y(self, row: int, col: int) -> float:
        return self.y[col * self.num_rows + row]

    def reserve_memory(self, y_cols: int) -> None:
        self.x = [0.0] * (self.num_cols * self.num_rows)
        self.y = [0.0] * (y_cols * self.num_rows)

    def set_x(self, col: int, row: int, value: float) -> bool:
        self.x[col * self.num_rows + row] = float(value)
        return False

    def set_y(self, col: int, row: int, value: float) -> bool:
        self.y[col * self.num_rows + row] = float(value)
        return False