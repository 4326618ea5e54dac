"""Tests for pipewave.solver.config module."""

import pytest
from pydantic import ValidationError

from pipewave.solver.config import SolverConfig


class TestSolverConfig:
    """Tests for SolverConfig."""

    def test_defaults(self, monkeypatch):
        for name in ("GRID_SIZE", "SEED", "LOG_DIR", "REPORT_INTERVAL"):
            monkeypatch.delenv(f"PIPEWAVE_{name}", raising=False)
        config = SolverConfig()

        assert config.grid_size == 15
        assert config.seed is None
        assert config.max_propagation_sweeps is None
        assert config.log_dir == "logs"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("PIPEWAVE_GRID_SIZE", "9")
        monkeypatch.setenv("PIPEWAVE_SEED", "42")
        config = SolverConfig()

        assert config.grid_size == 9
        assert config.seed == 42

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            SolverConfig(grid_size="big")

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            SolverConfig(tile_set="custom")

    def test_model_copy_update(self):
        config = SolverConfig(grid_size=4).model_copy(update={"seed": 3})
        assert config.grid_size == 4
        assert config.seed == 3
