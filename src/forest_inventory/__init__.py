"""
Forest Inventory: stand analysis for sample-plot inventories.

Rolls per-tree measurements up into stand-level metrics, builds diameter
distributions, computes Student's t confidence intervals on per-acre means,
and projects stand growth under exponential, logistic or linear models.

Quick Start:
    >>> from forest_inventory import Analyzer, LogisticGrowth, read_csv
    >>> inventory = read_csv('plots.csv')
    >>> analyzer = Analyzer(inventory)
    >>> print(analyzer.stand_metrics().total_basal_area)
    >>> analyzer.project_growth(LogisticGrowth(0.03, 300.0, 0.005), years=20)
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__author__ = "Forest Inventory Development Team"

# =============================================================================
# Domain Model
# =============================================================================
from .species import Species
from .tree import Tree, TreeStatus, ValidationIssue
from .plot import Plot
from .inventory import ForestInventory

# =============================================================================
# Volume Calculations
# =============================================================================
from .volume import VolumeEquation, DEFAULT_VOLUME_EQUATION

# =============================================================================
# Analysis
# =============================================================================
from .stand_metrics import SpeciesComposition, StandMetrics, compute_stand_metrics
from .diameter_distribution import DiameterClass, DiameterDistribution
from .sampling_statistics import (
    ConfidenceInterval,
    SamplingStatistics,
    compute_confidence_interval,
)
from .growth import (
    ExponentialGrowth,
    LogisticGrowth,
    LinearGrowth,
    GrowthModel,
    GrowthProjection,
    create_growth_model,
    project_growth,
    projections_to_dataframe,
)
from .analyzer import Analyzer

# =============================================================================
# Data Import/Export
# =============================================================================
from .inventory_io import (
    read_csv,
    read_csv_from_bytes,
    write_csv,
    read_json,
    read_json_from_bytes,
    write_json,
    read_excel,
    read_excel_from_bytes,
    write_excel,
    load_inventory,
    save_inventory,
    validate_csv_rows,
)

# =============================================================================
# Command Line
# =============================================================================
from .main import main

# =============================================================================
# Configuration and Logging
# =============================================================================
from .config_loader import ConfigLoader, get_config_loader, load_config_file
from .logging_config import get_logger, setup_logging

# =============================================================================
# Exceptions
# =============================================================================
from .exceptions import (
    ForestInventoryError,
    ConfigurationError,
    ParameterError,
    InvalidParameterError,
    DataError,
    InvalidDataError,
    InsufficientDataError,
    AnalysisError,
)

# =============================================================================
# Public API Definition
# =============================================================================
__all__ = [
    # Package Metadata
    "__version__",
    "__author__",
    # Domain Model
    "Species",
    "Tree",
    "TreeStatus",
    "ValidationIssue",
    "Plot",
    "ForestInventory",
    # Volume
    "VolumeEquation",
    "DEFAULT_VOLUME_EQUATION",
    # Analysis
    "SpeciesComposition",
    "StandMetrics",
    "compute_stand_metrics",
    "DiameterClass",
    "DiameterDistribution",
    "ConfidenceInterval",
    "SamplingStatistics",
    "compute_confidence_interval",
    "ExponentialGrowth",
    "LogisticGrowth",
    "LinearGrowth",
    "GrowthModel",
    "GrowthProjection",
    "create_growth_model",
    "project_growth",
    "projections_to_dataframe",
    "Analyzer",
    # Data Import/Export
    "read_csv",
    "read_csv_from_bytes",
    "write_csv",
    "read_json",
    "read_json_from_bytes",
    "write_json",
    "read_excel",
    "read_excel_from_bytes",
    "write_excel",
    "load_inventory",
    "save_inventory",
    "validate_csv_rows",
    # Command Line
    "main",
    # Configuration and Logging
    "ConfigLoader",
    "get_config_loader",
    "load_config_file",
    "get_logger",
    "setup_logging",
    # Exceptions
    "ForestInventoryError",
    "ConfigurationError",
    "ParameterError",
    "InvalidParameterError",
    "DataError",
    "InvalidDataError",
    "InsufficientDataError",
    "AnalysisError",
]
