from __future__ import annotations

import pytest

from basectl.domain.exceptions.controller import (
    ABSTRACT_CONTROLLER_MESSAGE,
    AbstractControllerError,
    ControllerError,
    HandlerError,
)


def test_controller_error_carries_code_and_details() -> None:
    err = ControllerError("bad", details={"field": "x"})
    assert str(err) == "bad"
    assert err.code == "CONTROLLER_ERROR"
    assert err.details == {"field": "x"}
    assert ControllerError().details == {}


def test_abstract_controller_error_defaults_to_fixed_message() -> None:
    err = AbstractControllerError()
    assert str(err) == ABSTRACT_CONTROLLER_MESSAGE
    assert isinstance(err, TypeError)
    assert isinstance(err, ControllerError)
    assert err.code == "ABSTRACT_CONTROLLER"


def test_handler_error_defaults_to_500() -> None:
    err = HandlerError("oops")
    assert err.status_code == 500
    assert err.code == "HANDLER_ERROR"


@pytest.mark.parametrize("status", [200, 302, 399, 600])
def test_handler_error_rejects_non_error_status(status: int) -> None:
    with pytest.raises(ValueError):
        HandlerError("x", status_code=status)
