"""
Tests for engine configuration, structured logging and the error taxonomy.
"""

import pytest
import sys
import os
import json
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    EngineConfig, get_config, set_config, setup_logging, JSONFormatter, Timer,
    AlgebraError, DomainError, DivisionByZeroError, NotPolynomialError,
    MaxIterationsReachedError, ParseError, symbol, add, groebner_basis, pow_, sub,
)


class TestEngineConfig:
    """Test configuration validation and installation."""

    def test_defaults_are_valid(self):
        """The default configuration validates."""
        cfg = EngineConfig()
        cfg.validate()
        assert cfg.default_monomial_order == "lex"

    @pytest.mark.parametrize("changes", [
        {"cache_capacity": 0},
        {"cache_eviction_fraction": 0.0},
        {"cache_eviction_fraction": 1.5},
        {"groebner_iteration_cap": 0},
        {"default_monomial_order": "revlex"},
        {"max_expand_terms": 0},
    ])
    def test_invalid_overrides(self, changes):
        """Nonsensical settings raise ValueError."""
        with pytest.raises(ValueError):
            EngineConfig().with_overrides(**changes)

    def test_with_overrides_copies(self):
        """with_overrides leaves the original untouched."""
        base = EngineConfig()
        changed = base.with_overrides(cache_capacity=8)
        assert changed.cache_capacity == 8
        assert base.cache_capacity == 1024

    def test_set_config_returns_previous(self):
        """set_config installs the new config and hands back the old one."""
        previous = set_config(get_config().with_overrides(groebner_iteration_cap=1))
        try:
            assert get_config().groebner_iteration_cap == 1
            x, y = symbol("x"), symbol("y")
            with pytest.raises(MaxIterationsReachedError):
                groebner_basis([sub(add([pow_(x, 2), pow_(y, 2)]), 1), sub(x, y)], [x, y])
        finally:
            set_config(previous)
        assert get_config().groebner_iteration_cap == previous.groebner_iteration_cap

    def test_set_config_validates(self):
        """An invalid config is not installed."""
        before = get_config()
        with pytest.raises(ValueError):
            set_config(EngineConfig(cache_capacity=-1))
        assert get_config() is before


class TestLogging:
    """Test structured JSON logging."""

    def test_setup_logging(self):
        """setup_logging installs exactly one JSON console handler."""
        logger = setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        assert logger.name == "symcore"
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("symcore.groebner").level == logging.DEBUG
        setup_logging(logging.WARNING)

    def test_log_file(self, tmp_path):
        """A log file adds a second handler."""
        path = tmp_path / "symcore.log"
        logger = setup_logging(logging.INFO, log_file=str(path))
        try:
            assert len(logger.handlers) == 2
        finally:
            for handler in logger.handlers[:]:
                handler.close()
                logger.removeHandler(handler)

    def test_json_formatter_includes_extra_data(self):
        """extra_data keys are merged into the JSON record."""
        record = logging.makeLogRecord({
            "name": "symcore.cache",
            "levelname": "DEBUG",
            "levelno": logging.DEBUG,
            "msg": "Evicted %d entries",
            "args": (3,),
            "extra_data": {"kind": "degree", "evicted": 3},
        })
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "Evicted 3 entries"
        assert entry["logger"] == "symcore.cache"
        assert entry["level"] == "DEBUG"
        assert entry["kind"] == "degree"
        assert entry["evicted"] == 3

    def test_timer(self):
        """Timer measures a non-negative duration."""
        assert Timer("idle").elapsed_ms() == 0.0
        with Timer("work") as timer:
            sum(range(1000))
        assert timer.elapsed_ms() >= 0.0
        assert timer.elapsed_ms() == timer.elapsed_ms()


class TestErrors:
    """Test the error taxonomy."""

    def test_hierarchy(self):
        """Every algebra error derives from AlgebraError."""
        for cls in (DomainError, DivisionByZeroError, NotPolynomialError,
                    MaxIterationsReachedError, ParseError):
            assert issubclass(cls, AlgebraError)

    def test_message_format(self):
        """Messages read 'operation: detail [in expr]'."""
        x = symbol("x")
        err = DomainError("poly_div", "bad divisor", x)
        assert str(err) == "poly_div: bad divisor [in x]"
        assert err.operation == "poly_div"
        assert err.expr is x

    def test_specialized_messages(self):
        """Subclasses fill in their detail."""
        assert str(DivisionByZeroError("div")) == "div: division by zero"
        assert str(MaxIterationsReachedError("groebner_basis", 5)) == \
            "groebner_basis: exceeded iteration cap of 5"
        assert str(ParseError("unexpected token", 4)) == "parse: unexpected token at position 4"
        assert str(NotPolynomialError("degree")) == "degree: not a polynomial"
