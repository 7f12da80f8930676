"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
EXPANSION_PANEL = "Expansion"
OUTPUT_PANEL = "Output"

ProjectDirArgument = Annotated[
    Path,
    typer.Argument(
        metavar="PROJECT_DIR",
        help="Directory holding the literate documents (defaults to the current directory).",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Configuration file to use instead of tanglesmith.yml in the project directory.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MaxPassesOption = Annotated[
    int | None,
    typer.Option(
        "--max-passes",
        min=1,
        help="Ceiling on expansion passes before cyclic references are given up on.",
        rich_help_panel=EXPANSION_PANEL,
    ),
]

OutputDirOption = Annotated[
    Path | None,
    typer.Option(
        "--output-dir",
        "-o",
        help="Directory receiving tangled files (defaults to the project directory).",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Report the files that would be written without touching the disk.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ForceOption = Annotated[
    bool,
    typer.Option(
        "--force",
        help="Write tangled files even when the run reported errors.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
