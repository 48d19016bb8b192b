import random

import pytest

from rangerforest.data import ArrayData


def _sample():
    # Column-major: column "a" then column "b".
    return ArrayData(
        x=[3.0, 1.0, 3.0, 2.0, 10.0, 20.0, 30.0, 40.0],
        y=[5.0, 6.0, 7.0, 8.0],
        variable_names=["a", "b"],
        num_rows=4,
        num_cols=2,
    )


def _snp_data():
    data = ArrayData(x=[], y=[1.0, 2.0, 3.0, 4.0], variable_names=[], num_rows=4, num_cols=0)
    data.add_snp_data(bytes([0b01101100]), 1)
    return data


def test_values_are_column_major():
    data = _sample()
    assert [data.get_x(row, 1) for row in range(4)] == [10.0, 20.0, 30.0, 40.0]
    assert [data.get_y(row, 0) for row in range(4)] == [5.0, 6.0, 7.0, 8.0]


def test_wrong_x_size_rejected():
    with pytest.raises(ValueError):
        ArrayData(x=[1.0, 2.0, 3.0], y=[], variable_names=["a"], num_rows=2, num_cols=1)


def test_variable_id():
    data = _sample()
    assert data.variable_id("b") == 1
    with pytest.raises(ValueError, match="Variable c not found."):
        data.variable_id("c")


def test_load_comma_file(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("a,y,b\n1,0,4\n2,1,5\n3,0,6\n")
    data = ArrayData()
    assert data.load_from_file(str(path), ["y"]) is False
    assert data.variable_names == ["a", "b"]
    assert data.num_rows == 3
    assert data.num_cols == 2
    assert [data.get_x(r, 0) for r in range(3)] == [1.0, 2.0, 3.0]
    assert [data.get_x(r, 1) for r in range(3)] == [4.0, 5.0, 6.0]
    assert [data.get_y(r, 0) for r in range(3)] == [0.0, 1.0, 0.0]
    assert data.external_data is False


def test_load_semicolon_file(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("y;a\n7;1.5\n8;2.5\n")
    data = ArrayData()
    data.load_from_file(str(path), ["y"])
    assert data.variable_names == ["a"]
    assert [data.get_x(r, 0) for r in range(2)] == [1.5, 2.5]
    assert [data.get_y(r, 0) for r in range(2)] == [7.0, 8.0]


def test_load_whitespace_file(tmp_path):
    path = tmp_path / "in.dat"
    path.write_text("a b y\n1 2 3\n4 5 6\n")
    data = ArrayData()
    data.load_from_file(str(path), ["y"])
    assert data.variable_names == ["a", "b"]
    assert [data.get_x(r, 1) for r in range(2)] == [2.0, 5.0]
    assert [data.get_y(r, 0) for r in range(2)] == [3.0, 6.0]


def test_load_whitespace_too_many_columns(tmp_path):
    path = tmp_path / "in.dat"
    path.write_text("a y\n1 2\n3 4 5\n")
    with pytest.raises(ValueError, match="Too many columns in row 1"):
        ArrayData().load_from_file(str(path), ["y"])


def test_load_whitespace_non_numeric(tmp_path):
    path = tmp_path / "in.dat"
    path.write_text("a y\n1 x\n")
    with pytest.raises(ValueError, match="Are all values numeric"):
        ArrayData().load_from_file(str(path), ["y"])


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError, match="Could not open input file."):
        ArrayData().load_from_file(str(tmp_path / "missing.csv"), ["y"])


def test_sort_index_maps_back_to_values():
    data = _sample()
    data.sort()
    for col in range(2):
        column = [data.get_x(row, col) for row in range(4)]
        assert data.num_unique_data_values(col) == len(set(column))
        for row in range(4):
            assert data.unique_data_value(col, data.index(row, col)) == column[row]
    assert data.max_num_unique_values() == 4


def test_all_values_sorted_and_distinct():
    data = _sample()
    assert data.all_values([0, 1, 2, 3], 0, 0, 4) == [1.0, 2.0, 3.0]
    assert data.all_values([0, 1, 2, 3], 0, 2, 4) == [2.0, 3.0]


def test_min_max_values():
    data = _sample()
    assert data.min_max_values([0, 1, 2, 3], 0, 0, 4) == (1.0, 3.0)
    assert data.min_max_values([0, 1, 2, 3], 1, 1, 3) == (20.0, 30.0)


def test_min_max_without_samples():
    with pytest.raises(ValueError):
        _sample().min_max_values([], 0, 0, 0)


def test_unordered_variables():
    data = _sample()
    data.set_unordered_variables(["b"])
    assert data.is_ordered_variable(0) is True
    assert data.is_ordered_variable(1) is False
    assert data.is_ordered_variable(3) is False
    with pytest.raises(ValueError):
        data.set_unordered_variables(["zzz"])


def test_permuted_columns_use_permuted_rows():
    data = _sample()
    data.permute_sample_ids(random.Random(7))
    assert sorted(data.permuted_sample_ids) == [0, 1, 2, 3]
    assert data.unpermuted_var_id(3) == 1
    for row in range(4):
        assert data.get_x(row, 2) == data.get_x(data.permuted_sample_id(row), 0)


def test_snp_decoding():
    data = _snp_data()
    assert data.num_cols == 1
    assert data.num_rows_rounded == 4
    assert [data.snp(row, 0, 0) for row in range(4)] == [0, 1, 2, 0]
    assert [data.index(row, 0) for row in range(4)] == [0, 1, 2, 0]


def test_snp_variables_have_three_levels():
    data = _snp_data()
    assert data.all_values([0, 1, 2, 3], 0, 0, 4) == [0.0, 1.0, 2.0]
    assert data.num_unique_data_values(0) == 3
    assert data.unique_data_value(0, 2) == 2.0
    assert data.max_num_unique_values() == 3


def test_set_snp_order_remaps_levels():
    data = _snp_data()
    data.set_snp_order([[2, 1, 0]])
    assert data.order_snps is True
    assert [data.snp(row, 0, 0) for row in range(4)] == [2, 1, 0, 2]


def test_order_snp_levels_without_snps_does_nothing():
    data = _sample()
    data.order_snp_levels(False)
    assert data.snp_order == []
    assert data.order_snps is False


def test_order_snp_levels_builds_permutations():
    data = _snp_data()
    data.order_snp_levels(False)
    assert data.order_snps is True
    assert len(data.snp_order) == 1
    assert sorted(data.snp_order[0]) == [0, 1, 2]