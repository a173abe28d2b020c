"""
Readers and writers for forest inventory files.

Tree data is exchanged as flat rows, one per tree, with plot attributes
repeated on every row:

    plot_id, tree_id, species_code, species_name, dbh, height, crown_ratio,
    status, expansion_factor, age, defect, plot_size_acres, slope_percent,
    aspect_degrees, elevation_ft

Excel workbooks carry the same rows on their first sheet. JSON files hold
the nested inventory -> plots -> trees structure.
"""
import io
import json
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from .exceptions import DataError, InvalidDataError
from .inventory import ForestInventory
from .logging_config import get_logger
from .plot import Plot
from .species import Species
from .tree import Tree, TreeStatus, ValidationIssue

__all__ = [
    'TREE_COLUMNS',
    'DEFAULT_PLOT_SIZE_ACRES',
    'read_csv',
    'read_csv_from_bytes',
    'write_csv',
    'read_json',
    'read_json_from_bytes',
    'write_json',
    'read_excel',
    'read_excel_from_bytes',
    'write_excel',
    'load_inventory',
    'save_inventory',
    'validate_csv_rows',
    'inventory_from_dataframe',
    'inventory_to_dataframe',
]

logger = get_logger(__name__)

TREE_COLUMNS = [
    'plot_id', 'tree_id', 'species_code', 'species_name', 'dbh', 'height',
    'crown_ratio', 'status', 'expansion_factor', 'age', 'defect',
    'plot_size_acres', 'slope_percent', 'aspect_degrees', 'elevation_ft',
]
REQUIRED_COLUMNS = ['plot_id', 'tree_id', 'species_code', 'species_name',
                    'dbh', 'status', 'expansion_factor']
DEFAULT_PLOT_SIZE_ACRES = 0.2


def _optional(value: Any, cast=float) -> Optional[Any]:
    if value is None or pd.isna(value):
        return None
    return cast(value)


def _check_columns(frame: pd.DataFrame) -> pd.DataFrame:
    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise InvalidDataError("tree data", f"missing required columns: {missing}")
    for column in TREE_COLUMNS:
        if column not in frame.columns:
            frame[column] = None
    return frame


def _read_frame(source: Union[str, Path, io.BytesIO]) -> pd.DataFrame:
    try:
        frame = pd.read_csv(source, skipinitialspace=True, dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise InvalidDataError("CSV data", str(e)) from e
    return _check_columns(frame)


def _read_excel_frame(source: Union[str, Path, io.BytesIO]) -> pd.DataFrame:
    # Tree rows are read from the first sheet
    try:
        frame = pd.read_excel(source, sheet_name=0, dtype=str)
    except (ValueError, KeyError, zipfile.BadZipFile) as e:
        raise InvalidDataError("Excel workbook", str(e)) from e
    return _check_columns(frame)


def _tree_from_row(row: Dict[str, Any], status: TreeStatus) -> Tree:
    try:
        return Tree(
            tree_id=int(row['tree_id']),
            plot_id=int(row['plot_id']),
            species=Species(common_name=str(row['species_name']).strip(),
                            code=str(row['species_code']).strip()),
            dbh=float(row['dbh']),
            height=_optional(row['height']),
            crown_ratio=_optional(row['crown_ratio']),
            status=status,
            expansion_factor=float(row['expansion_factor']),
            age=_optional(row['age'], int),
            defect=_optional(row['defect']),
        )
    except (TypeError, ValueError) as e:
        raise InvalidDataError(f"row for tree {row.get('tree_id')}", str(e)) from e


def inventory_from_dataframe(frame: pd.DataFrame, name: str,
                             validate: bool = True) -> ForestInventory:
    """Group flat tree rows into plots.

    Plot attributes are taken from the first row of each plot. Plots are
    sorted by plot_id; trees keep their row order.

    Args:
        frame: DataFrame with the tree row columns
        name: Inventory name
        validate: Raise on the first invalid tree when True

    Raises:
        InvalidDataError: On unknown statuses or invalid trees
    """
    plots: Dict[int, Plot] = {}
    for row in frame.to_dict(orient='records'):
        tree = _tree_from_row(row, TreeStatus.from_string(row['status']))
        if validate:
            tree.validate()

        plot = plots.get(tree.plot_id)
        if plot is None:
            plot_size = _optional(row.get('plot_size_acres'))
            plot = plots[tree.plot_id] = Plot(
                plot_id=tree.plot_id,
                plot_size_acres=DEFAULT_PLOT_SIZE_ACRES if plot_size is None else plot_size,
                slope_percent=_optional(row.get('slope_percent')),
                aspect_degrees=_optional(row.get('aspect_degrees')),
                elevation_ft=_optional(row.get('elevation_ft')),
            )
        plot.trees.append(tree)

    inventory = ForestInventory(name=name, plots=[plots[k] for k in sorted(plots)])
    logger.debug("Built inventory '%s' with %d plots and %d trees",
                 name, inventory.num_plots(), inventory.num_trees())
    return inventory


def inventory_to_dataframe(inventory: ForestInventory) -> pd.DataFrame:
    """Flatten an inventory into one row per tree."""
    records = []
    for plot in inventory.plots:
        for tree in plot.trees:
            records.append({
                'plot_id': tree.plot_id,
                'tree_id': tree.tree_id,
                'species_code': tree.species.code,
                'species_name': tree.species.common_name,
                'dbh': tree.dbh,
                'height': tree.height,
                'crown_ratio': tree.crown_ratio,
                'status': tree.status.value,
                'expansion_factor': tree.expansion_factor,
                'age': tree.age,
                'defect': tree.defect,
                'plot_size_acres': plot.plot_size_acres,
                'slope_percent': plot.slope_percent,
                'aspect_degrees': plot.aspect_degrees,
                'elevation_ft': plot.elevation_ft,
            })
    frame = pd.DataFrame(records, columns=TREE_COLUMNS)
    frame['age'] = frame['age'].astype('Int64')
    return frame


def read_csv(path: Union[str, Path]) -> ForestInventory:
    """Read forest inventory data from a CSV file.

    The inventory is named after the file stem.
    """
    path = Path(path)
    return inventory_from_dataframe(_read_frame(path), path.stem)


def read_csv_from_bytes(data: bytes, name: str) -> ForestInventory:
    """Read forest inventory data from CSV bytes."""
    return inventory_from_dataframe(_read_frame(io.BytesIO(data)), name)


def validate_csv_rows(data: bytes) -> List[ValidationIssue]:
    """Check every row of CSV tree data without stopping at the first problem.

    Format errors (missing columns, unparseable numbers) are still raised.

    Returns:
        All issues found; unknown statuses are reported and treated as Live

    Raises:
        InvalidDataError: If the data cannot be read as tree rows
    """
    frame = _read_frame(io.BytesIO(data))
    issues = []
    for row_index, row in enumerate(frame.to_dict(orient='records')):
        try:
            status = TreeStatus.from_string(row['status'])
        except InvalidDataError:
            try:
                plot_id, tree_id = int(row['plot_id']), int(row['tree_id'])
            except (TypeError, ValueError) as e:
                raise InvalidDataError(f"row {row_index}", str(e)) from e
            issues.append(ValidationIssue(
                plot_id=plot_id,
                tree_id=tree_id,
                field='status',
                message=f"Unknown tree status '{row['status']}', defaulting to Live",
                row_index=row_index,
            ))
            status = TreeStatus.LIVE
        issues.extend(_tree_from_row(row, status).validation_issues(row_index))
    return issues


def write_csv(inventory: ForestInventory, path: Union[str, Path]) -> None:
    """Write inventory tree rows to a CSV file."""
    inventory_to_dataframe(inventory).to_csv(path, index=False)


def read_excel(path: Union[str, Path]) -> ForestInventory:
    """Read forest inventory data from the first sheet of an Excel workbook.

    The sheet holds the same columns as the CSV format. The inventory is
    named after the file stem.
    """
    path = Path(path)
    return inventory_from_dataframe(_read_excel_frame(path), path.stem)


def read_excel_from_bytes(data: bytes, name: str) -> ForestInventory:
    """Read forest inventory data from Excel workbook bytes."""
    return inventory_from_dataframe(_read_excel_frame(io.BytesIO(data)), name)


def write_excel(inventory: ForestInventory, path: Union[str, Path]) -> None:
    """Write inventory tree rows to an Excel (.xlsx) workbook."""
    inventory_to_dataframe(inventory).to_excel(path, index=False, sheet_name='TreeList')


def _inventory_from_json_text(content: str) -> ForestInventory:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidDataError("JSON inventory", f"parsing error: {e}") from e
    try:
        inventory = ForestInventory.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidDataError("JSON inventory", f"unexpected structure: {e}") from e
    for tree in _all_trees(inventory.plots):
        tree.validate()
    return inventory


def _all_trees(plots: Iterable[Plot]) -> Iterable[Tree]:
    for plot in plots:
        yield from plot.trees


def read_json(path: Union[str, Path]) -> ForestInventory:
    """Read forest inventory data from a JSON file."""
    return _inventory_from_json_text(Path(path).read_text(encoding='utf-8'))


def read_json_from_bytes(data: bytes, name: str) -> ForestInventory:
    """Read forest inventory data from JSON bytes, renaming it to ``name``."""
    try:
        content = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise InvalidDataError("JSON inventory", f"invalid UTF-8: {e}") from e
    inventory = _inventory_from_json_text(content)
    inventory.name = name
    return inventory


def write_json(inventory: ForestInventory, path: Union[str, Path], pretty: bool = False) -> None:
    """Write forest inventory data to a JSON file."""
    indent = 2 if pretty else None
    Path(path).write_text(json.dumps(inventory.to_dict(), indent=indent), encoding='utf-8')


def load_inventory(path: Union[str, Path]) -> ForestInventory:
    """Read an inventory, choosing the reader from the file extension.

    Raises:
        DataError: If the extension is not .csv, .json, .xlsx or .xls
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        return read_csv(path)
    if suffix == '.json':
        return read_json(path)
    if suffix in ('.xlsx', '.xls'):
        return read_excel(path)
    raise DataError(f"Unsupported file format: '{suffix}'. Use .csv, .json or .xlsx")


def save_inventory(inventory: ForestInventory, path: Union[str, Path],
                   pretty: bool = False) -> None:
    """Write an inventory, choosing the writer from the file extension.

    Args:
        inventory: Inventory to write
        path: Destination ending in .csv, .json or .xlsx
        pretty: Indent JSON output

    Raises:
        DataError: If the extension is not .csv, .json or .xlsx
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.csv':
        write_csv(inventory, path)
    elif suffix == '.json':
        write_json(inventory, path, pretty)
    elif suffix == '.xlsx':
        write_excel(inventory, path)
    else:
        raise DataError(f"Unsupported output format: '{suffix}'. Use .csv, .json or .xlsx")
    logger.debug("Wrote inventory '%s' to %s", inventory.name, path)
