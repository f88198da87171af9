import csv
import re
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Dict, Optional, Sequence, Tuple

from models.statement import ColumnMapping, ColumnRole

# Get logger for this module
logger = logging.getLogger(__name__)

__all__ = [
    'decode_content',
    'split_csv_lines',
    'parse_csv_line',
    'parse_date',
    'parse_amount',
    'find_column_index',
    'build_column_mapping',
    'ColumnRolePattern',
]

SHIFT_JIS_CODEC = 'cp932'

DATE_PATTERNS = [
    re.compile(r'^(\d{4})/(\d{1,2})/(\d{1,2})$', re.ASCII),
    re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$', re.ASCII),
    re.compile(r'^(\d{4})\.(\d{1,2})\.(\d{1,2})$', re.ASCII),
    re.compile(r'^(\d{4})(\d{2})(\d{2})$', re.ASCII),
]

AMOUNT_NOISE = re.compile(r'[,¥￥\s]')
LEADING_INTEGER = re.compile(r'^[+-]?\d+', re.ASCII)
WHITESPACE = re.compile(r'\s')


def decode_content(content: bytes) -> str:
    """
    Decode uploaded statement bytes.

    Bank downloads are inconsistently encoded, so decoding never fails outright:
    strict UTF-8 is tried first, then Shift_JIS, then a lossy UTF-8 decode that
    substitutes replacement characters.
    """
    try:
        return content.decode('utf-8-sig')
    except UnicodeDecodeError:
        logger.info("Content is not valid UTF-8, trying Shift_JIS")

    try:
        return content.decode(SHIFT_JIS_CODEC)
    except UnicodeDecodeError:
        logger.warning("Content is neither UTF-8 nor Shift_JIS, decoding with replacement characters")

    return content.decode('utf-8', errors='replace')


def split_csv_lines(content: str) -> List[str]:
    """
    Split statement text into logical lines.

    Line breaks inside quoted fields do not end a line. A lone carriage return is
    dropped, and whitespace-only lines never appear in the output.
    """
    lines: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    length = len(content)

    while i < length:
        char = content[i]
        next_char = content[i + 1] if i + 1 < length else ''

        if char == '"':
            if in_quotes and next_char == '"':
                current.append('""')
                i += 2
                continue
            in_quotes = not in_quotes
            current.append(char)
        elif (char == '\n' or (char == '\r' and next_char == '\n')) and not in_quotes:
            line = ''.join(current)
            if line.strip():
                lines.append(line)
            current = []
            if char == '\r':
                i += 1
        elif char != '\r':
            current.append(char)
        i += 1

    line = ''.join(current)
    if line.strip():
        lines.append(line)

    return lines


class StatementDialect(csv.Dialect):
    delimiter = ','
    quotechar = '"'
    doublequote = True
    skipinitialspace = True
    lineterminator = '\n'
    quoting = csv.QUOTE_MINIMAL


def parse_csv_line(line: str) -> List[str]:
    """Split one logical line into trimmed fields, resolving quotes."""
    reader = csv.reader([line], dialect=StatementDialect())
    return [field.strip() for field in next(reader, [''])]


def parse_date(date_str: str) -> Optional[date]:
    """
    Parse a statement date (YYYY/M/D, YYYY-M-D, YYYY.M.D or YYYYMMDD).

    Only ASCII digits are accepted. Returns None when the value is not a date,
    including impossible calendar dates.
    """
    value = date_str.strip()
    for pattern in DATE_PATTERNS:
        match = pattern.match(value)
        if match:
            year, month, day = (int(part) for part in match.groups())
            try:
                return date(year, month, day)
            except ValueError:
                return None
    return None


def parse_amount(amount_str: str) -> int:
    """
    Parse a yen amount such as "¥12,345" or "-500".

    Blank and unparseable values both return 0; callers inspect the original
    string when they need to tell the two apart.
    """
    if not amount_str or not amount_str.strip():
        return 0
    cleaned = AMOUNT_NOISE.sub('', amount_str)
    match = LEADING_INTEGER.match(cleaned)
    if not match:
        return 0
    return int(match.group(0))


def _normalize_label(label: str) -> str:
    return WHITESPACE.sub('', label).lower()


def find_column_index(
    header: Sequence[str],
    possible_names: Sequence[str],
    excluded_names: Sequence[str] = ()
) -> Optional[int]:
    """Find the first column whose label contains one of the possible names."""
    for i, col in enumerate(header):
        if _label_matches(_normalize_label(col), possible_names, excluded_names):
            return i
    return None


def _label_matches(label: str, possible_names: Sequence[str], excluded_names: Sequence[str]) -> bool:
    if any(name.lower() in label for name in excluded_names):
        return False
    return any(name.lower() in label for name in possible_names)


@dataclass(frozen=True)
class ColumnRolePattern:
    """Header label substrings that identify a column role."""
    names: Tuple[str, ...]
    excluded: Tuple[str, ...] = ()

    def matches(self, label: str) -> bool:
        return _label_matches(_normalize_label(label), self.names, self.excluded)


def build_column_mapping(
    header: Sequence[str],
    role_patterns: Dict[ColumnRole, ColumnRolePattern]
) -> ColumnMapping:
    """
    Resolve header labels into a role -> column index mapping.

    Each column is claimed by the first role (in table order) whose pattern it
    matches; when several columns match the same role the first one wins.
    """
    mapping: ColumnMapping = {}
    for index, label in enumerate(header):
        for role, pattern in role_patterns.items():
            if pattern.matches(label):
                if role not in mapping:
                    mapping[role] = index
                break
    logger.debug(f"Resolved column mapping {mapping} from header {list(header)}")
    return mapping
