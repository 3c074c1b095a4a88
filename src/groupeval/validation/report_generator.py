"""
Report Generator
==================
Renders validation outcomes as plain text. One block per model:

    +++ TRAINING RF +++
    === Results of RF ===
    <summary>
    === Confusion Matrix of RF ===
    <matrix>

Convergence outcomes render as a CSV-like ``subsetSize,avgAccuracy`` block.
A file report is a header line followed by the model blocks sorted by model
name, so the text never depends on which worker finished first. Nothing
time-dependent is rendered: identical runs give identical bytes.
"""

from typing import Dict

from groupeval.config.settings import REPORT_RULE_WIDTH
from groupeval.errors import ModelTrainingError
from groupeval.validation.engine import ResultBlock, ValidationOutcome


def render_block(block: ResultBlock) -> str:
    lines = [f"=== Results of {block.title} ==="]
    lines.extend(block.notes)
    lines.append(block.evaluation.summary_string())
    lines.append(f"=== Confusion Matrix of {block.title} ===")
    lines.append(block.evaluation.matrix_string())
    return "\n".join(lines)


def render_curve(name: str, outcome: ValidationOutcome) -> str:
    lines = [f"=== Convergence of {name} ({outcome.mode}) ===", "subsetSize,avgAccuracy"]
    for point in outcome.curve or []:
        lines.append(f"{point.n_groups},{point.mean_accuracy:.6f}")
    return "\n".join(lines)


def render_model_report(name: str, outcome: ValidationOutcome) -> str:
    """Everything one model contributes to a file report."""
    parts = [f"+++ TRAINING {name} +++"]
    if outcome.curve is not None:
        parts.append(render_curve(name, outcome))
    parts.extend(render_block(b) for b in outcome.blocks)
    return "\n".join(parts) + "\n"


def render_failure(name: str, error: ModelTrainingError) -> str:
    return (f"+++ TRAINING {name} +++\n"
            f"!!! {name} failed: {type(error.cause).__name__}: {error.cause}\n")


def render_file_report(source: str, mode_label: str, results_by_model: Dict[str, str]) -> str:
    """Header naming the source, then model blocks in name order."""
    header = [
        "=" * REPORT_RULE_WIDTH,
        f"Evaluating file {source} ({mode_label})",
        "=" * REPORT_RULE_WIDTH,
    ]
    body = [results_by_model[name] for name in sorted(results_by_model)]
    return "\n".join(header) + "\n" + "\n".join(body)


def render_experiment_report(reports_by_file: Dict[str, str]) -> str:
    """File reports concatenated in file-name order."""
    return "\n".join(reports_by_file[name] for name in sorted(reports_by_file))
