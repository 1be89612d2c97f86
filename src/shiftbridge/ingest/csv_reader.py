"""Read uploaded CSV bytes into headers and string rows with pandas."""

from __future__ import annotations

import io
import logging
import warnings

import pandas as pd
from pydantic import BaseModel, Field

from shiftbridge.core.exceptions import FileUnreadable

logger = logging.getLogger(__name__)


class ParsedCsv(BaseModel):
    """Header row plus data rows (header -> cell, None for a short row's missing cells)."""

    headers: list[str] = Field(default_factory=list)
    rows: list[dict[str, str | None]] = Field(default_factory=list)


def read_csv(data: bytes, *, encoding: str = "utf-8-sig") -> ParsedCsv:
    """Parse comma-separated ``data`` whose first line is the header row.

    Every cell is kept as text (no NA or numeric coercion) and blank lines
    are skipped. Raises ``FileUnreadable`` when the bytes are not decodable
    or not CSV, and when a row has more cells than the header.
    """
    try:
        with warnings.catch_warnings():
            # pandas only warns when it truncates a row wider than the header
            warnings.simplefilter("error", pd.errors.ParserWarning)
            frame = pd.read_csv(
                io.BytesIO(data),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                encoding=encoding,
            )
    except pd.errors.EmptyDataError as exc:
        raise FileUnreadable("File is empty or has no header row") from exc
    except pd.errors.ParserWarning as exc:
        raise FileUnreadable(f"Row has more fields than the header: {exc}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise FileUnreadable(f"Could not parse CSV file: {exc}") from exc

    headers = [str(column) for column in frame.columns]
    rows = [
        {header: (None if pd.isna(value) else str(value)) for header, value in zip(headers, values)}
        for values in frame.itertuples(index=False, name=None)
    ]
    logger.debug("Read %d rows with headers %s", len(rows), headers)
    return ParsedCsv(headers=headers, rows=rows)
