from dataclasses import dataclass

from sqlbuild.dialect import SQL, get_available_dialects, is_supported_dialect
from sqlbuild.dialect import normalize_dialect

from libb import ConfigOptions

__all__ = [
    'BuilderOptions',
    'get_default_options',
    'set_default_options',
]


@dataclass
class BuilderOptions(ConfigOptions):
    """Options

    supported dialects: `sql`, `sqlite`, `mysql`, `postgresql`, `raw`

    - dialect: Dialect used by `Query.to_sql()` (default: sql)
    - strict_dialect: Raise on unknown dialects instead of passing
      text through unchanged (default: False)
    """
    dialect: str = SQL
    strict_dialect: bool = False

    def __post_init__(self):
        self.dialect = normalize_dialect(self.dialect)
        if self.strict_dialect and not is_supported_dialect(self.dialect):
            available = get_available_dialects()
            raise ValueError(f'dialect must be one of: {available}')

    def check_dialect(self, dialect: str) -> str:
        """Normalize `dialect`, rejecting unknown ones when strict."""
        dialect = normalize_dialect(dialect)
        if self.strict_dialect and not is_supported_dialect(dialect):
            raise ValueError(f'Unsupported dialect: {dialect}. Available: {get_available_dialects()}')
        return dialect


_default_options = BuilderOptions()


def get_default_options() -> BuilderOptions:
    """Options used when a render call is given none."""
    return _default_options


def set_default_options(options: BuilderOptions) -> None:
    """Replace the process-wide default options."""
    global _default_options
    _default_options = options
