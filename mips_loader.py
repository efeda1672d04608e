# mips_loader.py
import logging
import string
from typing import Iterable, List, Optional

from mips_errors import LoaderError

logger = logging.getLogger(__name__)


def parse_word(s: str, line_no: Optional[int] = None) -> Optional[int]:
    """Parse one listing line into a word; None for blank and comment lines.

    Lines hold 32 binary digits, most significant bit first. A 0x-prefixed
    hex literal is also accepted.
    """
    s = s.strip()
    if not s or s.startswith('#'):
        return None
    if s.startswith('0x') or s.startswith('0X'):
        digits = s[2:]
        if not digits or not all(c in string.hexdigits for c in digits):
            raise LoaderError(f'invalid hex word {s!r}', line_no)
        value = int(digits, 16)
        if value > 0xFFFFFFFF:
            raise LoaderError(f'hex word {s!r} does not fit in 32 bits', line_no)
        return value
    if len(s) != 32:
        raise LoaderError(f'expected 32 binary digits, got {len(s)} characters', line_no)
    bad = [c for c in s if c not in '01']
    if bad:
        raise LoaderError(f'non-binary character {bad[0]!r}', line_no)
    return int(s, 2)


def load_lines(lines: Iterable[str]) -> List[int]:
    words = []
    for line_no, line in enumerate(lines, start=1):
        value = parse_word(line, line_no)
        if value is not None:
            words.append(value)
    return words


def load_program(path: str) -> List[int]:
    try:
        with open(path, 'r', encoding='ascii') as f:
            words = load_lines(f)
    except (OSError, UnicodeDecodeError) as e:
        raise LoaderError(f'could not read program {path}: {e}') from e
    logger.info('Read %d words from %s', len(words), path)
    return words
