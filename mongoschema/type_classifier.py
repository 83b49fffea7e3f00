# mongoschema/type_classifier.py
import re
import datetime
import decimal
import warnings
from dateutil import parser as dateparser
from bson import Binary, Code, Decimal128, Int64, MaxKey, MinKey, ObjectId, Regex, Timestamp

from mongoschema.config import CFG, InferenceConfig
from mongoschema.types import Classification, TypeTag, UnsupportedType

_RE_DIGITS_ONLY = re.compile(r'^[\d\s]+$')
_RE_PLAIN_NUMBER = re.compile(r'^\s*[+-]?\d+(\.\d+)?\s*$')

# values with no useful Mongoose counterpart
_MIXED_TYPES = (Regex, re.Pattern, Code, MinKey, MaxKey, Timestamp)

_BINARY_TYPES = (Binary, bytes, bytearray, memoryview)

# parse defaults that differ in year, month and day
_DEFAULT_A = datetime.datetime(2000, 1, 1)
_DEFAULT_B = datetime.datetime(2001, 2, 2)

# --- type detection helpers -------------------------------------------------
def _is_bool(v) -> bool:
    return isinstance(v, bool)

def _is_big_integer(v) -> bool:
    # Int64 subclasses int, check it first
    return isinstance(v, Int64)

def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)

def _is_decimal(v) -> bool:
    return isinstance(v, (Decimal128, decimal.Decimal))

def _is_native_date(v) -> bool:
    return isinstance(v, (datetime.datetime, datetime.date))

def _is_date_string(v, cfg: InferenceConfig = CFG) -> bool:
    if not cfg.detect_date_strings or not isinstance(v, str):
        return False
    s = v.strip()
    if len(s) < cfg.date_min_length or len(s) > cfg.date_max_length:
        return False
    # numeric ids and amounts are not dates
    if _RE_DIGITS_ONLY.match(s) or _RE_PLAIN_NUMBER.match(s):
        return False
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", dateparser.UnknownTimezoneWarning)
            first = dateparser.parse(s, default=_DEFAULT_A, fuzzy=False)
            second = dateparser.parse(s, default=_DEFAULT_B, fuzzy=False)
    except (ValueError, OverflowError):
        return False
    # a bare weekday, month or time borrows its date from the default
    return (first.year, first.month, first.day) == (second.year, second.month, second.day)


def classify(value, cfg: InferenceConfig = CFG) -> Classification:
    """
    Map one terminal value to a TypeTag.

    Returns a Classification; unknown values yield a failure instead of raising.
    """
    if _is_bool(value):
        return Classification(tag=TypeTag.BOOLEAN)
    if _is_big_integer(value):
        return Classification(tag=TypeTag.BIG_INTEGER)
    if _is_number(value):
        return Classification(tag=TypeTag.NUMBER)
    if _is_decimal(value):
        return Classification(tag=TypeTag.DECIMAL)
    if _is_native_date(value):
        return Classification(tag=TypeTag.DATE)
    # Code subclasses str, so this runs before the string rules
    if value is None or isinstance(value, _MIXED_TYPES):
        return Classification(tag=TypeTag.MIXED)
    if _is_date_string(value, cfg):
        return Classification(tag=TypeTag.DATE)
    if isinstance(value, str):
        return Classification(tag=TypeTag.STRING)
    if isinstance(value, ObjectId):
        return Classification(tag=TypeTag.IDENTIFIER)
    if isinstance(value, _BINARY_TYPES):
        return Classification(tag=TypeTag.BINARY)
    return Classification(failure=UnsupportedType(type(value).__name__, _short_repr(value)))


def _short_repr(value, limit: int = 80) -> str:
    r = repr(value)
    if len(r) > limit:
        r = r[:limit - 3] + "..."
    return r
