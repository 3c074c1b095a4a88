"""
I/O utilities – report saving.
"""
from pathlib import Path


def save_report(text: str, path: Path):
    """Write a report as UTF-8 text, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    print(f"[io] Report saved → {path}")
