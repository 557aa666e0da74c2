"""
File operation utilities.

This module provides utilities for saving and loading data files
in various formats (JSON, CSV): schedule inputs, registry exports and
synchronization reports.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

import pandas as pd


logger = logging.getLogger(__name__)


def save_json(data: Dict[str, Any], filepath: Path) -> bool:
    """
    Save data to JSON file.

    Args:
        data: Dictionary data to save
        filepath: Path to save the JSON file

    Returns:
        True if save successful, False otherwise

    Examples:
        >>> data = {"commands": [], "summary": {"created": 0}}
        >>> save_json(data, Path("output/sync_report.json"))
        True
    """
    try:
        # Ensure parent directory exists
        filepath.parent.mkdir(parents=True, exist_ok=True)

        # Save JSON with proper formatting
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=str)

        logger.debug(f"Saved JSON file: {filepath}")
        return True

    except Exception as e:
        logger.error(f"Failed to save JSON file {filepath}: {e}", exc_info=True)
        return False


def load_json(filepath: Path) -> Optional[Dict[str, Any]]:
    """
    Load data from JSON file.

    Args:
        filepath: Path to the JSON file

    Returns:
        Loaded data dictionary, or None if load failed

    Examples:
        >>> data = load_json(Path("registry/lessons.json"))
        >>> if data:
        ...     print(len(data["lessons"]))
    """
    try:
        if not filepath.exists():
            logger.warning(f"JSON file not found: {filepath}")
            return None

        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        logger.debug(f"Loaded JSON file: {filepath}")
        return data

    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {filepath}: {e}")
        return None

    except Exception as e:
        logger.error(f"Failed to load JSON file {filepath}: {e}", exc_info=True)
        return None


def save_csv(df: pd.DataFrame, filepath: Path) -> bool:
    """
    Save DataFrame to CSV file.

    Args:
        df: Pandas DataFrame to save
        filepath: Path to save the CSV file

    Returns:
        True if save successful, False otherwise

    Examples:
        >>> df = pd.DataFrame([c.to_dict() for c in commands])
        >>> save_csv(df, Path("output/commands.csv"))
        True
    """
    try:
        # Ensure parent directory exists
        filepath.parent.mkdir(parents=True, exist_ok=True)

        # Save CSV with UTF-8 encoding
        df.to_csv(filepath, index=False, encoding='utf-8')

        logger.debug(f"Saved CSV file: {filepath}")
        return True

    except Exception as e:
        logger.error(f"Failed to save CSV file {filepath}: {e}", exc_info=True)
        return False


def load_csv(
    filepath: Path,
    dtype: Optional[Dict[str, Any]] = None
) -> Optional[pd.DataFrame]:
    """
    Load DataFrame from CSV file.

    Args:
        filepath: Path to the CSV file
        dtype: Optional column types passed to pandas (e.g. {"monday_date": str})

    Returns:
        Loaded DataFrame, or None if load failed

    Examples:
        >>> df = load_csv(Path("schedule/weeks.csv"))
        >>> if df is not None:
        ...     print(df["monday_date"].tolist())
    """
    try:
        if not filepath.exists():
            logger.warning(f"CSV file not found: {filepath}")
            return None

        df = pd.read_csv(filepath, encoding='utf-8', dtype=dtype)

        logger.debug(f"Loaded CSV file: {filepath}")
        return df

    except Exception as e:
        logger.error(f"Failed to load CSV file {filepath}: {e}", exc_info=True)
        return None


def generate_filename(prefix: str, extension: str) -> str:
    """
    Generate timestamped filename.

    Args:
        prefix: Filename prefix
        extension: File extension (without dot)

    Returns:
        Filename with timestamp (e.g., "prefix_20251101_103045.ext")

    Examples:
        >>> filename = generate_filename("sync_report", "json")
        >>> # Returns something like: "sync_report_20251101_103045.json"
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{extension}"
