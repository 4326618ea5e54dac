"""Pipewave solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class SolverConfig(BaseSettings):
    """Configuration settings for the Pipewave solver.

    Values can be set with `PIPEWAVE_`-prefixed environment variables or in a `.env` file.
    """

    grid_size: int = 15
    """Number of rows (and columns) of the grid. Default: 15."""

    seed: int | None = None
    """Seed for the random source. If None (default), a seed is drawn and logged."""

    max_propagation_sweeps: int | None = None
    """Maximum number of propagation sweeps after each collapse. If None (default), sweep until
    the total uncertainty stops changing."""

    report_interval: int = 10
    """Interval (in number of collapsed cells) at which to report progress. Default: 10."""

    log_dir: str | None = "logs"
    """Directory for per-run log files. If None, no log file is written."""

    print_progress: bool = False
    """Whether to echo progress reports to stdout as well as the log file. Default: False."""

    model_config = SettingsConfigDict(
        env_prefix="PIPEWAVE_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="forbid",
    )


config = SolverConfig()
