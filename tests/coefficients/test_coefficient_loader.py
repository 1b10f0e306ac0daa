# Tests for geomagnetism/coefficients/loader.py and model.py

import io
import logging

import numpy as np
import pytest

from geomagnetism.coefficients import (
    CoefficientModel,
    load_coefficient_model,
    parse_coefficient_table,
    read_coefficient_file,
    triangular_size,
)
from geomagnetism.errors import DomainError, ParseError

HEADER = "    2020.0            TEST-2        12/10/2019\n"
ROWS_N2 = [
    "  1  0  -29404.5       0.0        6.7        0.0",
    "  1  1   -1450.7    4652.9        7.7      -25.1",
    "  2  0   -2500.0       0.0      -11.5        0.0",
    "  2  1    2982.0   -2991.6       -7.1      -30.2",
    "  2  2    1676.8    -734.8       -2.2      -23.9",
]
SENTINEL = "999999999999999999999999999999999999999999999999"


def _table(rows, sentinel=True):
    text = HEADER + "\n".join(rows) + "\n"
    if sentinel:
        text += SENTINEL + "\n"
    return text


def test_parse_header_metadata(small_model):
    assert small_model.name == "TEST-3"
    assert small_model.epoch == 2020.0
    assert small_model.release_date == "12/10/2019"
    assert small_model.nmax == 3
    assert small_model.num_terms == triangular_size(3) == 9
    assert small_model.validity_end == 2025.0


def test_parse_coefficient_values(small_model):
    assert small_model.coefficient(1, 1) == (-1450.7, 4652.9, 7.7, -25.1)
    assert small_model.coefficient(3, 0) == (1363.9, 0.0, 2.8, 0.0)
    # n = 0 row and upper triangle stay empty
    assert small_model.g[0, 0] == 0.0
    assert small_model.g[1, 2] == 0.0


def test_model_arrays_are_read_only(small_model):
    with pytest.raises(ValueError):
        small_model.g[1, 0] = 0.0


@pytest.mark.parametrize(
    "source",
    [
        _table(ROWS_N2).encode("ascii"),
        io.BytesIO(_table(ROWS_N2).encode("ascii")),
        io.StringIO(_table(ROWS_N2)),
        _table(ROWS_N2),
    ],
)
def test_load_from_bytes_streams_and_text(source):
    model = load_coefficient_model(source)
    assert model.nmax == 2
    assert model.coefficient(2, 2) == (1676.8, -734.8, -2.2, -23.9)


def test_table_without_end_marker_uses_all_rows(caplog):
    with caplog.at_level(logging.DEBUG, logger="geomagnetism.coefficients.loader"):
        model = parse_coefficient_table(_table(ROWS_N2, sentinel=False))
    assert model.nmax == 2
    assert "no end marker" in caplog.text


def test_rows_after_end_marker_are_ignored():
    text = _table(ROWS_N2) + "  3  0  1.0  0.0  0.0  0.0\n"
    assert parse_coefficient_table(text).nmax == 2


def test_comments_and_blank_lines_are_skipped():
    rows = ["# Gauss coefficients", ""] + ROWS_N2
    assert parse_coefficient_table(_table(rows)).nmax == 2


def test_legacy_999_sentinel():
    text = HEADER + "\n".join(ROWS_N2) + "\n999 0 0 0 0 0\n"
    assert parse_coefficient_table(text).nmax == 2


def test_declared_nmax_accepts_complete_table():
    assert parse_coefficient_table(_table(ROWS_N2), nmax=2).nmax == 2


def test_empty_table_is_rejected():
    with pytest.raises(ParseError, match="empty"):
        parse_coefficient_table("\n\n")


def test_header_only_table_is_rejected():
    with pytest.raises(ParseError, match="no data rows"):
        parse_coefficient_table(HEADER + SENTINEL + "\n")


def test_header_must_start_with_epoch():
    with pytest.raises(ParseError, match="epoch") as excinfo:
        parse_coefficient_table("WMM-2020 2020.0\n" + "\n".join(ROWS_N2))
    assert excinfo.value.line_number == 1


def test_order_above_degree_is_rejected():
    rows = ROWS_N2[:2] + ["  2  3  1.0  1.0  0.0  0.0"]
    with pytest.raises(ParseError, match="outside 0..n") as excinfo:
        parse_coefficient_table(_table(rows))
    assert excinfo.value.line_number == 4


def test_degree_above_declared_nmax_is_rejected():
    with pytest.raises(ParseError, match="exceeds declared nmax"):
        parse_coefficient_table(_table(ROWS_N2), nmax=1)


@pytest.mark.parametrize("years", [0.0, -5.0, float("nan")])
def test_non_positive_validity_span_is_a_parse_error(years, small_cof_text):
    with pytest.raises(ParseError, match="Validity span"):
        parse_coefficient_table(_table(ROWS_N2), validity_years=years)
    with pytest.raises(ParseError, match="Validity span"):
        load_coefficient_model(small_cof_text.encode("ascii"), validity_years=years)


def test_duplicate_pair_is_rejected():
    rows = ROWS_N2[:2] + [ROWS_N2[1]] + ROWS_N2[2:]
    with pytest.raises(ParseError, match="out of order"):
        parse_coefficient_table(_table(rows))


def test_out_of_order_rows_are_rejected():
    rows = [ROWS_N2[1], ROWS_N2[0]] + ROWS_N2[2:]
    with pytest.raises(ParseError, match="out of order"):
        parse_coefficient_table(_table(rows))


def test_missing_pair_is_reported():
    rows = ROWS_N2[:3] + ROWS_N2[4:]
    with pytest.raises(ParseError, match=r"\(2, 1\)"):
        parse_coefficient_table(_table(rows))


def test_missing_degree_for_declared_nmax_is_reported():
    with pytest.raises(ParseError, match=r"\(3, 0\)"):
        parse_coefficient_table(_table(ROWS_N2), nmax=3)


@pytest.mark.parametrize(
    "bad_row,message",
    [
        ("  2  1  2982.0  -2991.6  -7.1", "Expected 6 fields"),
        ("  2  1  2982.0  abc  -7.1  -30.2", "Non-numeric"),
        ("  2  1  2982.0  nan  -7.1  -30.2", "finite"),
        ("  2  0  -2500.0  5.0  -11.5  0.0", "must be zero for m=0"),
        ("  0  0  1.0  0.0  0.0  0.0", "Degree must be >= 1"),
    ],
)
def test_malformed_rows(bad_row, message):
    rows = ROWS_N2[:2] + [bad_row]
    with pytest.raises(ParseError, match=message) as excinfo:
        parse_coefficient_table(_table(rows))
    assert excinfo.value.line_number == 4


def test_non_ascii_bytes_are_rejected():
    with pytest.raises(ParseError, match="ASCII"):
        load_coefficient_model("2020.0 WMM é\n".encode("utf-8"))


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_coefficient_table("")


def test_read_coefficient_file(tmp_path, small_cof_text):
    path = tmp_path / "WMM.COF"
    path.write_text(small_cof_text)
    model = read_coefficient_file(path)
    assert model.name == "TEST-3"


def test_read_missing_coefficient_file(tmp_path):
    with pytest.raises(ParseError, match="Could not read"):
        read_coefficient_file(tmp_path / "missing.COF")


def test_from_rows_leaves_missing_pairs_at_zero():
    model = CoefficientModel.from_rows([(2, 1, 5.0, 6.0, 0.5, 0.6)], epoch=2000.0)
    assert model.nmax == 2
    assert model.coefficient(2, 1) == (5.0, 6.0, 0.5, 0.6)
    assert model.coefficient(1, 0) == (0.0, 0.0, 0.0, 0.0)


def test_from_rows_drops_h_for_zonal_terms():
    model = CoefficientModel.from_rows([(1, 0, 1.0, 9.0, 0.1, 9.0)], epoch=2000.0)
    assert model.h[1, 0] == 0.0
    assert model.dh[1, 0] == 0.0


def test_model_rejects_mismatched_shapes():
    with pytest.raises(DomainError):
        CoefficientModel(
            name="bad",
            epoch=2020.0,
            g=np.zeros((3, 3)),
            h=np.zeros((2, 2)),
            dg=np.zeros((3, 3)),
            dh=np.zeros((3, 3)),
        )


def test_coefficient_lookup_outside_model(small_model):
    with pytest.raises(DomainError):
        small_model.coefficient(4, 0)


def test_without_secular_variation(small_model):
    static = small_model.without_secular_variation()
    np.testing.assert_array_equal(static.g, small_model.g)
    assert not np.any(static.dg)
    assert not np.any(static.dh)
