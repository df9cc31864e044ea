import logging

from churn_analysis.utils.logger import get_logger


def test_get_logger_is_idempotent():
    a = get_logger("ChurnTest")
    b = get_logger("ChurnTest")

    assert a is b
    assert len(a.handlers) == 1
    assert a.level == logging.INFO
    assert a.propagate is False
