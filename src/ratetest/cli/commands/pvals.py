"""Rate p-value and classification command implementation."""

import sys
import json
from contextlib import redirect_stdout
from pathlib import Path
from typing import Optional

import pandas as pd

from ratetest.api import KineticModel, rate_pvals_report
from ratetest.config import RatesConfig
from ratetest.exceptions import RateTestError
from ratetest.io.fits import read_fit_table


def _load_config(config: Optional[Path], mode: Optional[str]) -> RatesConfig:
    rates_config = RatesConfig.from_json(config) if config else RatesConfig()
    if mode is not None:
        rates_config = rates_config.replace(model_selection=mode)
    return rates_config


def run_pvals(
    fits: Path,
    mode: Optional[str],
    c_tsh: Optional[float],
    config: Optional[Path],
    format: str,
    jobs: int,
    verbose: bool,
    classify: bool,
):
    """Compute rate p-values (or gene classes) and print them to stdout."""
    try:
        rates_config = _load_config(config, mode)
    except (RateTestError, OSError) as e:
        print("Error: Invalid configuration", file=sys.stderr)
        print(f"Details: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        bank = read_fit_table(fits)
    except (RateTestError, OSError) as e:
        print(f"Error: Could not load fit table from {fits}", file=sys.stderr)
        print(f"Details: {e}", file=sys.stderr)
        sys.exit(1)

    if verbose:
        print(f"Loaded {len(bank)} genes, models: {', '.join(bank.models)}", file=sys.stderr)

    try:
        # progress goes to stderr so stdout carries only the results
        with redirect_stdout(sys.stderr):
            report = rate_pvals_report(
                KineticModel(bank, rates_config), c_tsh=c_tsh, n_jobs=jobs, verbose=verbose
            )
    except RateTestError as e:
        print("Error: Analysis failed", file=sys.stderr)
        print(f"Details: {e}", file=sys.stderr)
        sys.exit(1)

    if classify:
        output_text = _format_classes(report, format)
    elif format == "json":
        output_text = report.to_json()
    elif format == "tsv":
        output_text = report.to_tsv().rstrip("\n")
    else:
        output_text = _format_text(report)

    print(output_text)


def _format_text(report) -> str:
    """Format results as human-readable text."""
    lines = [report.summary(), ""]
    lines.append(f"{'gene':<20} {'synthesis':>12} {'degradation':>12} {'processing':>12}")
    lines.append("-" * 60)
    for gene, row in report.pvals.iterrows():
        values = [
            "NA" if pd.isna(row[rate]) else f"{row[rate]:.4g}"
            for rate in ("synthesis", "degradation", "processing")
        ]
        lines.append(f"{str(gene):<20} {values[0]:>12} {values[1]:>12} {values[2]:>12}")
    return "\n".join(lines)


def _format_classes(report, format: str) -> str:
    """Format gene classes."""
    classes = report.gene_class()
    if format == "json":
        return json.dumps({str(gene): code for gene, code in classes.items()}, indent=2)
    if format == "tsv":
        lines = ["gene\tclass"]
        lines.extend(f"{gene}\t{code}" for gene, code in classes.items())
        return "\n".join(lines)
    lines = []
    for code, count in classes.value_counts().items():
        lines.append(f"{code:<4} {count}")
    lines.append("")
    lines.extend(f"{str(gene):<20} {code}" for gene, code in classes.items())
    return "\n".join(lines)
