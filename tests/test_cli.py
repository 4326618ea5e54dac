"""Tests for the pipewave command-line entry point."""

import pytest

import pipewave
from pipewave.domain import CellDomain
from pipewave.grid import Grid
from pipewave.solver import solver as solver_module
from pipewave.solver.solver import SolveResult, SolverStats, SolveStatus


class TestMain:
    """Tests for pipewave.main."""

    def test_solves_single_cell(self, capsys):
        pipewave.main(["--size", "1", "--seed", "3", "--no-log"])

        out = capsys.readouterr().out
        assert "Seed: 3" in out
        assert "Solved 1x1 grid (seed 3, 1 collapses)." in out

    def test_writes_log_to_log_dir(self, tmp_path, capsys):
        pipewave.main(["--size", "1", "--seed", "5", "--log-dir", str(tmp_path)])

        assert (tmp_path / "1x1" / "seed-5.log").is_file()

    def test_contradiction_reported(self, monkeypatch, capsys):
        grid = Grid(2)
        grid.set(1, 0, CellDomain.contradiction())

        def fake_run(config):
            return SolveResult(
                grid=grid,
                status=SolveStatus.CONTRADICTION,
                stats=SolverStats(),
                seed=8,
                contradiction=(1, 0),
            )

        monkeypatch.setattr(solver_module, "run", fake_run)

        with pytest.raises(SystemExit) as exc_info:
            pipewave.main(["--size", "2", "--no-log"])

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "ContradictionError: no tile fits cell (1, 0) (seed 8)" in out
        assert " ! " in out

    def test_overrides_config(self, monkeypatch):
        seen = {}

        def fake_run(config):
            seen["config"] = config
            return SolveResult(
                grid=Grid(1),
                status=SolveStatus.SOLVED,
                stats=SolverStats(),
                seed=config.seed,
            )

        monkeypatch.setattr(solver_module, "run", fake_run)
        pipewave.main(["--size", "7", "--seed", "2", "--max-sweeps", "4", "--progress", "--no-log"])

        config = seen["config"]
        assert config.grid_size == 7
        assert config.seed == 2
        assert config.max_propagation_sweeps == 4
        assert config.print_progress is True
        assert config.log_dir is None

    def test_invalid_size(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            pipewave.main(["--size", "0"])
        assert exc_info.value.code == 2

    def test_log_options_exclusive(self, capsys):
        with pytest.raises(SystemExit):
            pipewave.main(["--log-dir", "x", "--no-log"])
