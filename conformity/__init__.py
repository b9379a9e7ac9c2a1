"""conformity: declarative data validation.

Compile a spec once, validate many inputs:

    from conformity import compile_schema, validate, required, string

    schema = compile_schema({required("name"): string("filled?")})
    validate({"name": "Jane"}, schema)   # Success({"name": "Jane"}, ())
"""

__version__ = "0.1.0"

from conformity.errors import AppError, ErrorCode, Err, Ok, Result, SchemaError
from conformity.logging import configure_logging, get_logger
from conformity.validation import *  # noqa: F401,F403
from conformity.validation import __all__ as _validation_all

__all__ = [
    "__version__",
    "AppError",
    "ErrorCode",
    "Err",
    "Ok",
    "Result",
    "SchemaError",
    "configure_logging",
    "get_logger",
    *_validation_all,
]
