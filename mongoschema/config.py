# mongoschema/config.py
import os
from dataclasses import dataclass

from mongoschema.errors import ConfigurationError

UNION_POLICIES = ("union", "mixed")

# --- TUNABLES ---------------------------------------------------------------
@dataclass
class InferenceConfig:
    # key Mongoose uses to declare a field's type; anything but "type" wraps every leaf
    type_key: str = "type"
    # per-level indent of the rendered schema
    indent: str = "  "
    # "union": conflicting tags become Schema.Types.Union; "mixed": collapse to Mixed
    union_policy: str = "union"
    # classify date-looking strings as Date
    detect_date_strings: bool = True
    # strings outside these lengths are never treated as dates
    date_min_length: int = 4
    date_max_length: int = 40

    def validate(self) -> "InferenceConfig":
        if not self.type_key or "." in self.type_key or self.type_key.isdigit():
            raise ConfigurationError(f"invalid type key: {self.type_key!r}")
        if self.union_policy not in UNION_POLICIES:
            raise ConfigurationError(
                f"unknown union policy {self.union_policy!r}, expected one of {', '.join(UNION_POLICIES)}"
            )
        if self.date_min_length > self.date_max_length:
            raise ConfigurationError("date_min_length must not exceed date_max_length")
        return self

# default config instance (import and copy this)
CFG = InferenceConfig()
# ----------------------------------------------------------------------------


def log_level_from_env(default: str = "WARNING") -> str:
    return os.getenv("MONGOSCHEMA_LOG_LEVEL", default).upper()


def validate_sample_size(sample_size):
    if sample_size is None:
        return None
    if isinstance(sample_size, bool) or not isinstance(sample_size, int) or sample_size <= 0:
        raise ConfigurationError(f"sample size must be a positive integer, got {sample_size!r}")
    return sample_size
