from __future__ import annotations

import logging

import pytest
import structlog

from conformity.config import get_settings
from conformity.validation import compile_schema, integer, optional, required, string


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reset_logging():
    yield
    structlog.reset_defaults()
    library_logger = logging.getLogger("conformity")
    library_logger.handlers = []
    library_logger.propagate = True
    library_logger.setLevel(logging.NOTSET)


@pytest.fixture
def user_schema():
    return compile_schema({
        required("name"): string("filled?"),
        required("age"): integer(),
    })


@pytest.fixture
def account_schema():
    return compile_schema({
        required("user"): {
            required("name"): string("filled?"),
            optional("email"): string(),
        },
    })
