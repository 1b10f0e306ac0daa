"""
Parse WMM-style coefficient tables into a :class:`CoefficientModel`.

Table layout::

        2020.0            WMM-2020        12/10/2019
      1  0  -29404.5       0.0        6.7        0.0
      1  1   -1450.7    4652.9        7.7      -25.1
      ...
    999999999999999999999999999999999999999999999999

The header carries the epoch, the model name and an optional release date.
Each data row is ``n m g h dg dh``. Rows must be ordered by degree and then by
order, each ``(n, m)`` pair appearing once; the table ends at a row of nines
(or ``n = 999``) or at the end of the resource.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, TextIO

import numpy as np

from .. import config
from ..errors import ParseError
from .model import CoefficientModel, triangular_size

logger = logging.getLogger(__name__)

CoefficientSource = bytes | bytearray | memoryview | str | BinaryIO | TextIO


def _read_text(source: CoefficientSource) -> str:
    """Decode a byte buffer, string, or stream into text."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        raw = bytes(source)
    elif isinstance(source, str):
        return source
    elif hasattr(source, "read"):
        raw = source.read()
        if isinstance(raw, str):
            return raw
    else:
        raise ParseError(f"Unsupported coefficient source type: {type(source).__name__}")
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Coefficient table is not ASCII text: {exc}") from exc


def _is_sentinel(tokens: list[str]) -> bool:
    first = tokens[0]
    if first.startswith(config.COEFFICIENT_SENTINEL_PREFIX):
        return True
    try:
        return int(first) == config.COEFFICIENT_SENTINEL_DEGREE
    except ValueError:
        return False


def _parse_header(line: str, line_number: int) -> tuple[float, str, str | None]:
    tokens = line.split()
    try:
        epoch = float(tokens[0])
    except ValueError:
        raise ParseError(f"Header must start with the epoch year, got {tokens[0]!r}", line_number) from None
    if not np.isfinite(epoch):
        raise ParseError("Epoch year must be finite", line_number)
    name = tokens[1] if len(tokens) > 1 else "unnamed"
    release_date = tokens[2] if len(tokens) > 2 else None
    return epoch, name, release_date


def _parse_row(tokens: list[str], line_number: int) -> tuple[int, int, float, float, float, float]:
    if len(tokens) != config.COEFFICIENT_ROW_FIELDS:
        raise ParseError(
            f"Expected {config.COEFFICIENT_ROW_FIELDS} fields (n m g h dg dh), got {len(tokens)}",
            line_number,
        )
    try:
        n, m = int(tokens[0]), int(tokens[1])
        g, h, dg, dh = (float(tok) for tok in tokens[2:])
    except ValueError as exc:
        raise ParseError(f"Non-numeric coefficient field: {exc}", line_number) from None
    if not np.all(np.isfinite([g, h, dg, dh])):
        raise ParseError("Coefficient values must be finite", line_number)
    return n, m, g, h, dg, dh


def parse_coefficient_table(
    text: str,
    nmax: int | None = None,
    validity_years: float = config.DEFAULT_VALIDITY_YEARS,
) -> CoefficientModel:
    """
    Parse the text of a coefficient table.

    Args:
        text: Full table text including the header line.
        nmax: Declared maximum degree. Rows above it are rejected and every
            pair up to it must be present. Inferred from the rows when None.
        validity_years: Validity span assigned to the model.

    Returns:
        The parsed, read-only CoefficientModel.

    Raises:
        ParseError: On a missing header, malformed or out-of-order rows,
            ``m > n``, degrees above ``nmax``, duplicates, gaps, a table without
            data rows, or a non-positive validity span.
    """
    if nmax is not None and nmax < 1:
        raise ParseError(f"Declared nmax must be >= 1, got {nmax}")
    if not validity_years > 0:
        raise ParseError(f"Validity span must be positive, got {validity_years}")

    header = None
    rows: list[tuple[int, int, float, float, float, float]] = []
    previous: tuple[int, int] | None = None
    terminated = False

    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        tokens = stripped.split()

        if header is None:
            header = _parse_header(stripped, line_number)
            continue
        if _is_sentinel(tokens):
            terminated = True
            break

        n, m, g, h, dg, dh = _parse_row(tokens, line_number)
        if n < 1:
            raise ParseError(f"Degree must be >= 1, got n={n}", line_number)
        if m < 0 or m > n:
            raise ParseError(f"Order m={m} outside 0..n for n={n}", line_number)
        if nmax is not None and n > nmax:
            raise ParseError(f"Degree n={n} exceeds declared nmax={nmax}", line_number)
        if previous is not None and (n, m) <= previous:
            raise ParseError(
                f"Row (n={n}, m={m}) is out of order after (n={previous[0]}, m={previous[1]})",
                line_number,
            )
        if m == 0 and (h != 0.0 or dh != 0.0):
            raise ParseError(f"h and dh must be zero for m=0 (n={n})", line_number)
        previous = (n, m)
        rows.append((n, m, g, h, dg, dh))

    if header is None:
        raise ParseError("Coefficient table is empty")
    if not rows:
        raise ParseError("Coefficient table has no data rows")
    if not terminated:
        logger.debug("Coefficient table has no end marker; using all %d rows", len(rows))

    epoch, name, release_date = header
    model_nmax = nmax if nmax is not None else rows[-1][0]
    expected = triangular_size(model_nmax)
    if len(rows) != expected:
        seen = {(n, m) for n, m, *_ in rows}
        missing = [
            (n, m)
            for n in range(1, model_nmax + 1)
            for m in range(n + 1)
            if (n, m) not in seen
        ]
        raise ParseError(
            f"Expected {expected} coefficient rows for nmax={model_nmax}, "
            f"got {len(rows)}; first missing pair (n, m) = {missing[0]}"
        )

    model = CoefficientModel.from_rows(
        rows,
        epoch=epoch,
        name=name,
        release_date=release_date,
        validity_years=validity_years,
    )
    logger.debug(
        "Loaded coefficient model %s (epoch %.1f, nmax %d)", model.name, model.epoch, model.nmax
    )
    return model


def load_coefficient_model(
    source: CoefficientSource,
    nmax: int | None = None,
    validity_years: float = config.DEFAULT_VALIDITY_YEARS,
) -> CoefficientModel:
    """Load a coefficient model from bytes, text, or an open stream."""
    return parse_coefficient_table(
        _read_text(source), nmax=nmax, validity_years=validity_years
    )


def read_coefficient_file(
    path: str | Path,
    nmax: int | None = None,
    validity_years: float = config.DEFAULT_VALIDITY_YEARS,
) -> CoefficientModel:
    """Load a coefficient model from a file on disk (e.g. ``WMM.COF``)."""
    try:
        with open(path, "rb") as handle:
            return load_coefficient_model(handle, nmax=nmax, validity_years=validity_years)
    except OSError as exc:
        raise ParseError(f"Could not read coefficient file {path}: {exc}") from exc
