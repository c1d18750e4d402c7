"""Build a data dictionary across files.

Two passes:
1. First-seen classification - each variable is profiled from the first file
   (in the given order) whose header contains it. Later files only add
   provenance; the type is never revised.
2. Categorical pooling - for every categorical variable, values are collected
   from every file that has the column and the union replaces the vocabulary,
   unless it grows past max_categorical_values (then it is flagged instead).

File handles need `file_id`, `read_header()` and
`read_column_sample(column_name, max_rows)`; an optional `clear_cache(nrows=None)`
is called to release parsed data once a pass is done with the file. Unreadable
files are skipped with a warning and never abort the run.

A profile's `files` lists every file whose header contains the variable, even
if a later column of that file failed to read and the file was skipped.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..config.settings import ProfilerConfig
from ..loader.tabular import FileReadError
from ..utils.numbers import parse_decimal, format_number
from .cleaner import clean_column
from .classifier import classify_column
from .descriptions import describe_variable
from .models import DataDictionary, VariableProfile, CategoricalValue

logger = logging.getLogger(__name__)

READ_ERRORS = (FileReadError, OSError)


def _file_id(handle) -> str:
    return str(getattr(handle, 'file_id', handle))


def _release(handle, nrows: Optional[int] = None) -> None:
    """Drop a handle's cached frames (only the nrows one if given)."""
    clear = getattr(handle, 'clear_cache', None)
    if clear is None:
        return
    if nrows is None:
        clear()
    else:
        clear(nrows)


def profile_variable(
    name: str,
    raw_values: Iterable,
    file_id: Optional[str] = None,
    config: Optional[ProfilerConfig] = None,
) -> VariableProfile:
    """
    Profile one in-memory column: clean, classify, describe.

    The unit is inferred by the classifier for numeric types.
    """
    config = config or ProfilerConfig()
    cleaned = clean_column(raw_values, config.missing_tokens)
    profile = classify_column(name, cleaned)
    profile.description = describe_variable(name, profile.type)
    if file_id is not None:
        profile.add_file(file_id)
    return profile


def _read_header(handle, dictionary: Optional[DataDictionary] = None) -> Optional[List[str]]:
    file_id = _file_id(handle)
    try:
        return handle.read_header()
    except READ_ERRORS as e:
        logger.warning(f"Skipping {file_id}: {e}")
        if dictionary is not None:
            dictionary.skip_file(file_id, str(e))
        return None


def _first_pass(files: Sequence, config: ProfilerConfig, dictionary: DataDictionary) -> Dict[str, List]:
    """Profile each variable from its first file. Returns name -> handles containing it."""
    sources: Dict[str, List] = {}

    for handle in files:
        file_id = _file_id(handle)
        header = _read_header(handle, dictionary)
        if header is None:
            continue

        for name in header:
            sources.setdefault(name, []).append(handle)
            if name in dictionary:
                dictionary[name].add_file(file_id)
                continue
            try:
                raw = handle.read_column_sample(name, config.sample_rows)
            except READ_ERRORS as e:
                logger.warning(f"Skipping {file_id}: {e}")
                dictionary.skip_file(file_id, str(e))
                break
            profile = profile_variable(name, raw, file_id, config)
            dictionary.variables[name] = profile
            logger.debug(f"Profiled {name} from {file_id}: {profile.type}")

        _release(handle, config.sample_rows)

    return sources


def _collect_from_file(handle, names: Sequence[str], config: ProfilerConfig) -> Tuple[Dict[str, Set[str]], Optional[str]]:
    """Non-missing values of each named column in one file, plus an error if unreadable."""
    found: Dict[str, Set[str]] = {}
    file_id = _file_id(handle)
    try:
        header = set(handle.read_header())
        for name in names:
            if name not in header:
                continue
            raw = handle.read_column_sample(name, config.categorical_sample_rows)
            found[name] = set(clean_column(raw, config.missing_tokens).values)
    except READ_ERRORS as e:
        return {}, f"{file_id}: {e}"
    finally:
        _release(handle)
    return found, None


def _pool_values(files: Sequence, names: Sequence[str], config: ProfilerConfig) -> Tuple[Dict[str, Set[str]], List[Tuple[str, str]]]:
    """Union values per name across files, optionally on a thread pool."""
    pooled: Dict[str, Set[str]] = {name: set() for name in names}
    failures: List[Tuple[str, str]] = []

    if config.max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            results = list(pool.map(lambda h: _collect_from_file(h, names, config), files))
    else:
        results = [_collect_from_file(h, names, config) for h in files]

    # Union is order-independent, so the merge order doesn't matter
    for handle, (found, error) in zip(files, results):
        if error:
            logger.warning(f"Skipping {error}")
            failures.append((_file_id(handle), error))
            continue
        for name, values in found.items():
            pooled[name] |= values
    return pooled, failures


def _sorted_vocabulary(values: Set[str]) -> List[str]:
    """
    Sort pooled values.

    Purely numeric vocabularies are normalised ('1.0' -> '1', '01' -> '1') and
    sorted by value, so '10' follows '9'. This departs from a plain text sort of
    the raw cells. Anything non-numeric sorts as text.
    """
    parsed = [parse_decimal(v) for v in values]
    if parsed and all(p is not None for p in parsed):
        return [format_number(p) for p in sorted(set(parsed))]
    return sorted(values)


def collect_categorical_values(
    files: Sequence,
    name: str,
    config: Optional[ProfilerConfig] = None,
) -> Tuple[List[CategoricalValue], bool]:
    """
    Pool one variable's values across all files.

    Returns:
        (categories, flagged). Categories is empty when nothing was found or
        when the vocabulary exceeds max_categorical_values, in which case
        flagged is True.
    """
    config = config or ProfilerConfig()
    pooled, _ = _pool_values(files, [name], config)
    values = pooled[name]
    if len(values) > config.max_categorical_values:
        logger.warning(
            f"{name}: {len(values)} distinct values (>{config.max_categorical_values}), add categories manually"
        )
        return [], True
    return [CategoricalValue(value=v) for v in _sorted_vocabulary(values)], False


def _second_pass(sources: Dict[str, List], config: ProfilerConfig, dictionary: DataDictionary) -> None:
    """Replace categorical vocabularies with the union across all files."""
    names = [p.name for p in dictionary.categorical()]
    if not names:
        return

    # Only files that had at least one categorical column need re-reading
    seen = set()
    files = []
    for name in names:
        for handle in sources.get(name, []):
            if id(handle) not in seen:
                seen.add(id(handle))
                files.append(handle)

    pooled, failures = _pool_values(files, names, config)
    for file_id, reason in failures:
        dictionary.skip_file(file_id, reason)

    for name in names:
        values = pooled[name]
        if not values:
            continue
        if len(values) > config.max_categorical_values:
            logger.warning(
                f"{name}: {len(values)} distinct values (>{config.max_categorical_values}), "
                f"keeping first-file categories"
            )
            dictionary.flagged.append(name)
            continue
        dictionary[name].categorical_values = [
            CategoricalValue(value=v) for v in _sorted_vocabulary(values)
        ]


def build_dictionary(files: Sequence, config: Optional[ProfilerConfig] = None) -> DataDictionary:
    """
    Profile every variable across a set of files.

    Args:
        files: File handles in a stable order; the first file containing a
            variable decides its type
        config: Missing tokens and row limits (defaults if omitted)

    Returns:
        DataDictionary with one VariableProfile per distinct variable name
    """
    config = config or ProfilerConfig()
    files = list(files)
    dictionary = DataDictionary()

    sources = _first_pass(files, config, dictionary)
    _second_pass(sources, config, dictionary)
    for handle in files:
        _release(handle)

    logger.debug(
        f"Built dictionary: {len(dictionary)} variables from {len(files)} files "
        f"({len(dictionary.skipped_files)} skipped, {len(dictionary.flagged)} flagged)"
    )
    return dictionary
