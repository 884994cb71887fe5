import csv
import io
import logging
from typing import Any, Iterable, List, Sequence

logger = logging.getLogger(__name__)


def parse_csv_rows(text: str, delimiter: str = ",") -> List[List[str]]:
    """
    Tokenize delimited text into rows of strings.

    Args:
        text (str): Raw delimited text, first row being the header.
        delimiter (str): Cell delimiter.

    Returns:
        List[List[str]]: One list of cells per non-blank line.
    """
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    rows = [row for row in reader if row]
    logger.debug(f"Tokenized {len(rows)} rows")
    return rows


def format_csv_rows(rows: Iterable[Sequence[Any]], delimiter: str = ",") -> str:
    """
    Format rows of already stringified cells as delimited text.

    Args:
        rows: Rows of cells; cells containing the delimiter, quotes or
            newlines are quoted.
        delimiter (str): Cell delimiter.

    Returns:
        str: Lines joined with ``\\n``, without a trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerows(rows)
    text = buffer.getvalue()
    return text[:-1] if text.endswith("\n") else text
