import runpy
import warnings

import library_service.exceptions as exceptions
from library_service.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    BusinessRuleViolationError,
    DuplicateResourceError,
    ResourceNotFoundError,
    ValidationError,
)


def test_status_codes():
    assert ResourceNotFoundError.status_code == 404
    assert BusinessRuleViolationError.status_code == 422
    assert DuplicateResourceError.status_code == 409
    assert ValidationError.status_code == 400
    assert AuthenticationError.status_code == 401
    assert AccessDeniedError.status_code == 403


def test_module_loads_without_deprecation_warnings():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        runpy.run_path(exceptions.__file__)

    assert [str(w.message) for w in caught] == []
