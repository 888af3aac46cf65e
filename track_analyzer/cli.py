"""Command-line interface for Track Analyzer.

Provides commands for:
- analyze: Estimate tempo (BPM) and key of a WAV file
- info: Show WAV file information and the loudest 30 s segment
"""

import json
import logging
import time
import typer
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

app = typer.Typer(
    name="track-analyzer",
    help="Tempo and key detection for 16-bit PCM WAV files",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass
class StageTimings:
    """Track timing of processing stages."""

    stages: Dict[str, float] = field(default_factory=dict)
    _current_stage: Optional[str] = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)

    def start(self, stage: str) -> None:
        """Start timing a stage."""
        self._current_stage = stage
        self._start_time = time.perf_counter()

    def stop(self) -> float:
        """Stop timing the current stage, return duration."""
        if self._current_stage is None:
            return 0.0
        duration = time.perf_counter() - self._start_time
        self.stages[self._current_stage] = duration
        self._current_stage = None
        return duration

    @property
    def total_time(self) -> float:
        return sum(self.stages.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "stages": self.stages,
            "total_time": self.total_time,
        }


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_path: Optional[Path], strict_key: Optional[float]):
    from .core import AnalysisConfig

    data: Dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            console.print(f"[red]Error: Config file not found: {config_path}[/red]")
            raise typer.Exit(1)
        try:
            data = json.loads(config_path.read_text())
        except json.JSONDecodeError as e:
            console.print(f"[red]Error: Invalid config: {e}[/red]")
            raise typer.Exit(1)
        if not isinstance(data, dict):
            console.print("[red]Error: Invalid config: expected a JSON object[/red]")
            raise typer.Exit(1)
    if strict_key is not None:
        data["min_key_energy"] = strict_key

    try:
        return AnalysisConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        console.print(f"[red]Error: Invalid config: {e}[/red]")
        raise typer.Exit(1)


def _read_input(input_file: Path):
    from .core import AudioFormatError
    from .input import read_wav_file

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        return read_wav_file(input_file)
    except AudioFormatError as e:
        console.print(f"[red]Detection unavailable: {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input WAV file (16-bit PCM)"),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    parallel: bool = typer.Option(
        False, "--parallel", help="Run tempo and key detection on separate threads"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="JSON file overriding analysis settings"
    ),
    strict_key: Optional[float] = typer.Option(
        None, "--strict-key", help="Report a key only if the chroma peak exceeds this share (0-1)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Estimate tempo and key of a WAV file.

    **Examples:**

        track-analyzer analyze song.wav

        track-analyzer analyze song.wav --json --strict-key 0.2
    """
    from .engine import AnalysisEngine

    _configure_logging(verbose)
    config = _load_config(config_path, strict_key)
    timings = StageTimings()

    timings.start("decode")
    samples = _read_input(input_file)
    timings.stop()

    engine = AnalysisEngine(config)
    timings.start("analyze")
    result = engine.analyze(samples, parallel=parallel)
    timings.stop()

    if json_output:
        output = {
            "input": str(input_file),
            "duration": samples.duration,
            "sample_rate": samples.sample_rate,
            "channels": samples.channels,
            **result.to_dict(),
        }
        if verbose:
            output["timings"] = timings.to_dict()
        console.print_json(data=output)
        return

    console.print(f"\n[bold blue]Analysis: {input_file.name}[/bold blue]")
    console.print(f"  Duration: {samples.duration:.2f}s, Sample rate: {samples.sample_rate}Hz")
    tempo = f"{result.bpm} BPM" if result.bpm is not None else "unknown"
    console.print(f"  Tempo: {tempo}")
    console.print(f"  Key: {result.key.name if result.key is not None else 'unknown'}")

    if verbose and result.key is not None:
        alternatives = engine.key_detector.alternatives(samples.head(config.max_duration))
        _show_keys_table(alternatives)
        console.print(f"  [dim]Analysis time: {timings.total_time:.2f}s[/dim]")


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input WAV file (16-bit PCM)"),
    segment: float = typer.Option(
        30.0, "--segment", "-s", help="Length of the loudest segment to locate (seconds)"
    ),
):
    """Show information about a WAV file."""
    from .analysis import find_best_segment

    samples = _read_input(input_file)

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {samples.duration:.2f} seconds")
    console.print(f"  Sample rate: {samples.sample_rate} Hz")
    console.print(f"  Channels: {samples.channels}")
    console.print(f"  Samples: {len(samples):,}")

    if not samples.is_empty:
        try:
            start, end = find_best_segment(samples, target_duration=segment)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"  Loudest segment: {start:.2f}s - {end:.2f}s")


def _show_keys_table(keys):
    """Display alternative keys in a table."""
    table = Table(title="Alternative Keys")
    table.add_column("Key", style="cyan")
    table.add_column("Score", style="magenta")

    for key in keys:
        table.add_row(key.name, f"{key.score:.3f}")

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
