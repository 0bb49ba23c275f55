import logging

import pytest

import autodiff.logging as adlog
from autodiff import ADConfig, FLOAT64, REAL64, new_dense_matrix, new_scalar, null_scalar


def test_defaults():
    assert ADConfig.EQUALS_EPSILON == 1e-12
    assert ADConfig.SYMMETRY_EPSILON == 1e-12
    assert ADConfig.LOG1PEXP_BOUNDS == (-37.0, 18.0, 33.3)


def test_set_default_scalar_type(restore_default_type):
    assert ADConfig.set_default_scalar_type(FLOAT64) is FLOAT64
    assert ADConfig.DEFAULT_SCALAR_TYPE == "float64"
    assert ADConfig.resolve() is FLOAT64
    assert ADConfig.resolve("real64") is REAL64
    assert new_scalar(1.0).stype is FLOAT64


def test_equals_epsilon_is_configurable(monkeypatch):
    monkeypatch.setattr(ADConfig, "EQUALS_EPSILON", 0.5)
    assert new_scalar(1.0).equals(1.4)


def test_symmetry_epsilon_is_configurable(monkeypatch):
    m = new_dense_matrix([[1.0, 2.0], [2.001, 1.0]], 2, 2)
    assert not m.is_symmetric()
    monkeypatch.setattr(ADConfig, "SYMMETRY_EPSILON", 1e-2)
    assert m.is_symmetric()


def test_loggers_live_under_package_namespace():
    assert adlog.getLogger("autodiff.matrix.base").name == "autodiff.matrix.base"


def test_tip_debug_log(caplog):
    m = new_dense_matrix([[1, 2, 3], [4, 5, 6]], 2, 3)
    with caplog.at_level(logging.DEBUG, logger="autodiff"):
        m.tip()
    assert "transposed 2x3 matrix in place" in caplog.text


def test_mdotm_aliasing_debug_log(caplog):
    m = new_dense_matrix([[1, 2], [3, 4]], 2, 2)
    with caplog.at_level(logging.DEBUG, logger="autodiff"):
        m.mdotm(m, m)
    assert "shares storage" in caplog.text


def test_setup_logging(restore_root_logger):
    root = restore_root_logger
    adlog.init_logging()
    assert len(root.handlers) == 1
    sh = root.handlers[0]
    assert sh.level == logging.INFO
    adlog.setup_logging(1)
    assert sh.level == logging.DEBUG
    adlog.setup_logging(5)
    assert sh.level == logging.DEBUG - 1
    assert logging.getLevelName(logging.DEBUG - 1) == "DEBUG1"


def test_stream_handler_filters_foreign_loggers(restore_root_logger):
    adlog.init_logging()
    f = restore_root_logger.handlers[0].filters[0]
    own = logging.LogRecord("autodiff.vector.sparse", logging.INFO, __file__, 1, "x", None, None)
    other = logging.LogRecord("numpy", logging.INFO, __file__, 1, "x", None, None)
    assert f.filter(own)
    assert not f.filter(other)


def test_add_debug_log(restore_root_logger, tmp_path):
    adlog.init_logging()
    path = tmp_path / "debug.log"
    fh = adlog.add_debug_log(str(path))
    logger = adlog.getLogger("autodiff.test")
    logger.debug("message for the debug log")
    fh.flush()
    assert "message for the debug log" in path.read_text()
    assert fh.level == logging.DEBUG


def test_logging_does_not_change_results(restore_root_logger):
    adlog.init_logging()
    adlog.setup_logging(2)
    x = new_scalar(2.0)
    assert null_scalar().exp(x).get_float64() == pytest.approx(7.38905609893065)
