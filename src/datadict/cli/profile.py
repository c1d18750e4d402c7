"""
Profile command - build a data dictionary from data files.
"""
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.table import Table

from datadict.cli.console import console
from datadict.config import load_config, ConfigError
from datadict.loader import TabularFile
from datadict.profiling import build_dictionary, DataDictionary


def _format_values(profile) -> str:
    """Short rendering of categories or range for the summary table."""
    if profile.categorical_values:
        values = [c.value for c in profile.categorical_values]
        shown = ', '.join(values[:6])
        return shown + (f" (+{len(values) - 6})" if len(values) > 6 else '')
    if profile.min_value or profile.max_value:
        return f"{profile.min_value} - {profile.max_value}"
    return profile.pattern


def display_dictionary(dictionary: DataDictionary) -> None:
    """Print the dictionary as a Rich table."""
    table = Table(title=f"Data Dictionary ({len(dictionary)} variables)")
    table.add_column("Variable", style="variable")
    table.add_column("Type", style="vtype")
    table.add_column("Unit", style="unit")
    table.add_column("Values")
    table.add_column("Req", justify="center")
    table.add_column("Uniq", justify="center")
    table.add_column("Files", justify="right", style="muted")
    table.add_column("Description", overflow="fold")

    for p in dictionary:
        table.add_row(
            p.name,
            p.type,
            p.unit,
            _format_values(p),
            "✓" if p.required else "",
            "✓" if p.unique else "",
            str(len(p.files)),
            p.description,
        )
    console.print(table)


def apply_metadata(dictionary: DataDictionary, path: Path) -> Optional[List[str]]:
    """
    Overlay an existing dataset_description.json on the detected profiles.

    Returns its global missingValueCodes, if any. A file that can't be read
    or has the wrong shape is reported and otherwise ignored.
    """
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        return dictionary.apply_dataset_description(data)
    except (OSError, ValueError, TypeError, AttributeError, KeyError) as e:
        console.print(f"[warning]Could not load metadata from {path}:[/] {e}")
        return None


@click.command('profile')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='JSON file with missing tokens and row limits')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write PropertyValue list as JSON instead of printing a table')
@click.option('--sample-rows', type=click.IntRange(min=1), help='Rows read per file when classifying')
@click.option('--categorical-sample-rows', type=click.IntRange(min=1),
              help='Rows read per file when pooling categories')
@click.option('--missing', 'extra_missing', multiple=True, help='Extra missing-value token (repeatable)')
@click.option('--workers', type=click.IntRange(min=1), help='Threads for the category re-scan')
@click.option('--sheet', help='Sheet name for Excel files (default: first sheet)')
@click.option('--metadata', 'metadata_path', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Existing dataset_description.json whose variableMeasured overrides detected values')
@click.option('--include-missing-codes', is_flag=True, help='Add missingValueCodes to each variable in JSON output')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def profile_command(
    files: Tuple[Path, ...],
    config_path: Optional[Path],
    output: Optional[Path],
    sample_rows: Optional[int],
    categorical_sample_rows: Optional[int],
    extra_missing: Tuple[str, ...],
    workers: Optional[int],
    sheet: Optional[str],
    metadata_path: Optional[Path],
    include_missing_codes: bool,
    verbose: bool,
):
    """
    Infer types, ranges, categories and descriptions for every column.

    FILES are read in the order given; the first file containing a variable
    decides its type.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(config_path)
        if sample_rows:
            config.sample_rows = sample_rows
        if categorical_sample_rows:
            config.categorical_sample_rows = categorical_sample_rows
        if workers:
            config.max_workers = workers
        for token in extra_missing:
            config.add_missing_token(token)
        config.validate()
    except ConfigError as e:
        console.print(f"[error]Configuration error:[/] {e}")
        raise SystemExit(1)

    handles = [TabularFile(path, file_id=str(path), sheet_name=sheet) for path in files]

    with console.status(f"Profiling {len(handles)} file(s)..."):
        dictionary = build_dictionary(handles, config)

    codes = list(config.missing_tokens)
    if metadata_path:
        codes = apply_metadata(dictionary, metadata_path) or codes

    if output:
        props = dictionary.to_property_values(codes if include_missing_codes else None)
        output.write_text(json.dumps(props, indent=2), encoding='utf-8')
        console.print(f"[success]Wrote {len(dictionary)} variables to {output}[/]")
    else:
        display_dictionary(dictionary)

    for file_id, reason in dictionary.skipped_files:
        console.print(f"[skipped]Skipped {file_id}:[/] {reason}")
    for name in dictionary.flagged:
        console.print(
            f"[flagged]{name}: more than {config.max_categorical_values} distinct values - add categories manually[/]"
        )

    if not len(dictionary):
        console.print("[error]No variables found[/]")
        raise SystemExit(1)
