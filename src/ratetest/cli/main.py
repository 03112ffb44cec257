"""Main CLI application for ratetest."""

import typer
from pathlib import Path
from typing import Optional
from enum import Enum

app = typer.Typer(
    name="ratetest",
    help="Test kinetic rates of gene expression for time-dependent variation",
    no_args_is_help=True,
)


class ModelSelection(str, Enum):
    """Strategy used to assign rate p-values."""
    LLR = "llr"
    AIC = "aic"


class OutputFormat(str, Enum):
    """Output format."""
    TEXT = "text"
    JSON = "json"
    TSV = "tsv"


@app.command()
def pvals(
    fits: Path = typer.Option(
        ...,
        "--fits", "-f",
        help="Long-format fit table (gene, model, logLik, n_params, chisq_pvalue)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    mode: Optional[ModelSelection] = typer.Option(
        None,
        "--mode", "-m",
        help="Model selection strategy (default: from config, else llr)",
    ),
    c_tsh: Optional[float] = typer.Option(
        None,
        "--cTsh", "--chisq-threshold",
        help="Chi-squared threshold for considering a comparison valid",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="JSON configuration (modelSelection, thresholds, llrtests)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Output format",
    ),
    jobs: int = typer.Option(
        1,
        "--jobs", "-j",
        help="Worker threads (one per rate at most)",
        min=1,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show progress",
    ),
):
    """
    Compute one p-value per gene and rate.

    Example:
        ratetest pvals -f fits.tsv
        ratetest pvals -f fits.tsv --cTsh 0.2 --format tsv
        ratetest pvals -f fits.tsv --mode aic
    """
    from .commands.pvals import run_pvals

    run_pvals(
        fits=fits,
        mode=mode.value if mode is not None else None,
        c_tsh=c_tsh,
        config=config,
        format=format.value,
        jobs=jobs,
        verbose=verbose,
        classify=False,
    )


@app.command()
def classify(
    fits: Path = typer.Option(
        ...,
        "--fits", "-f",
        help="Long-format fit table (gene, model, logLik, n_params, chisq_pvalue)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    mode: Optional[ModelSelection] = typer.Option(
        None,
        "--mode", "-m",
        help="Model selection strategy (default: from config, else llr)",
    ),
    c_tsh: Optional[float] = typer.Option(
        None,
        "--cTsh", "--chisq-threshold",
        help="Chi-squared threshold for considering a comparison valid",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="JSON configuration (modelSelection, thresholds, llrtests)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TSV,
        "--format",
        help="Output format",
    ),
):
    """
    Classify genes by which rates vary (e.g. "0", "a", "bc").

    A rate is variable when its p-value is below the Brown threshold
    configured for it.

    Example:
        ratetest classify -f fits.tsv
    """
    from .commands.pvals import run_pvals

    run_pvals(
        fits=fits,
        mode=mode.value if mode is not None else None,
        c_tsh=c_tsh,
        config=config,
        format=format.value,
        jobs=1,
        verbose=False,
        classify=True,
    )


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
