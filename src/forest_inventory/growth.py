"""
Stand growth projection.

Projects stand-level per-acre metrics forward from the inventory's current
means under one of three closed-form models:

- Exponential: V(t) = V0 · e^(r·t); TPA(t) = TPA0 · e^(-m·t)
- Logistic:    V(t) = K / (1 + ((K - V0) / V0) · e^(-r·t)); TPA as exponential
- Linear:      V(t) = V0 + i·t; TPA(t) = max(TPA0 - m·t, 0)

Every projected value after year 0 is clamped at zero. Exponents that
overflow evaluate to infinity and degenerate denominators to zero, so long
horizons and extreme coefficients never raise.
"""
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Tuple, Union, TYPE_CHECKING

import pandas as pd

from .config_loader import GROWTH_MODELS_FILE, get_config_loader
from .exceptions import ConfigurationError, InsufficientDataError, InvalidParameterError
from .logging_config import get_logger, log_projection_summary
from .volume import VolumeEquation

if TYPE_CHECKING:
    from .inventory import ForestInventory

__all__ = [
    'StandBaseline',
    'ExponentialGrowth',
    'LogisticGrowth',
    'LinearGrowth',
    'GrowthModel',
    'GrowthProjection',
    'create_growth_model',
    'project_growth',
    'projections_to_dataframe',
]

logger = get_logger(__name__)

# Calibration constants tying one basal-area unit of linear increment to
# cubic and board foot growth. Their derivation is undocumented.
LINEAR_CUFT_PER_BA_UNIT = 10.0
LINEAR_BDFT_PER_BA_UNIT = 50.0

# (tpa, basal_area, volume_cuft, volume_bdft)
Metrics = Tuple[float, float, float, float]


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _non_negative(value: float) -> float:
    # NaN from inf * 0 also clamps to zero
    return value if value > 0.0 else 0.0


@dataclass(frozen=True)
class StandBaseline:
    """Year-0 per-acre stand values a projection starts from."""
    tpa: float
    basal_area: float
    volume_cuft: float
    volume_bdft: float

    @classmethod
    def from_inventory(cls, inventory: 'ForestInventory',
                       volume_equation: Optional[VolumeEquation] = None) -> "StandBaseline":
        return cls(
            tpa=inventory.mean_tpa(),
            basal_area=inventory.mean_basal_area(),
            volume_cuft=inventory.mean_volume_cuft(volume_equation),
            volume_bdft=inventory.mean_volume_bdft(volume_equation),
        )


@dataclass(frozen=True)
class ExponentialGrowth:
    """Simple exponential growth.

    Attributes:
        annual_rate: Relative growth rate of basal area and volume per year
        mortality_rate: Annual mortality as a proportion (e.g. 0.005 = 0.5%)
    """
    annual_rate: float
    mortality_rate: float

    name = 'exponential'

    def values_at(self, baseline: StandBaseline, t: float) -> Metrics:
        factor = _exp(self.annual_rate * t)
        return (
            baseline.tpa * _exp(-self.mortality_rate * t),
            baseline.basal_area * factor,
            baseline.volume_cuft * factor,
            baseline.volume_bdft * factor,
        )


@dataclass(frozen=True)
class LogisticGrowth:
    """Logistic growth toward a basal area carrying capacity.

    Volumes follow the same curve with carrying capacities scaled by
    carrying_capacity / baseline basal area.

    Attributes:
        annual_rate: Intrinsic growth rate per year
        carrying_capacity: Maximum basal area (sq ft/acre)
        mortality_rate: Annual mortality as a proportion (e.g. 0.005 = 0.5%)
    """
    annual_rate: float
    carrying_capacity: float
    mortality_rate: float

    name = 'logistic'

    def _logistic(self, v0: float, k: float, t: float) -> float:
        if v0 <= 0.0:
            return 0.0
        offset = (k - v0) / v0
        if offset == 0.0:
            return k
        denominator = 1.0 + offset * _exp(-self.annual_rate * t)
        if not denominator > 0.0:
            return 0.0
        return k / denominator

    def values_at(self, baseline: StandBaseline, t: float) -> Metrics:
        if baseline.basal_area > 0.0:
            ba_ratio = self.carrying_capacity / baseline.basal_area
        else:
            ba_ratio = 1.0
        return (
            baseline.tpa * _exp(-self.mortality_rate * t),
            self._logistic(baseline.basal_area, self.carrying_capacity, t),
            self._logistic(baseline.volume_cuft, baseline.volume_cuft * ba_ratio, t),
            self._logistic(baseline.volume_bdft, baseline.volume_bdft * ba_ratio, t),
        )


@dataclass(frozen=True)
class LinearGrowth:
    """Linear growth with absolute TPA mortality.

    Attributes:
        annual_increment: Basal area increment per year (sq ft/acre)
        mortality_rate: Trees per acre lost per year
    """
    annual_increment: float
    mortality_rate: float

    name = 'linear'

    def values_at(self, baseline: StandBaseline, t: float) -> Metrics:
        increment = self.annual_increment * t
        return (
            max(baseline.tpa - self.mortality_rate * t, 0.0),
            baseline.basal_area + increment,
            baseline.volume_cuft + increment * LINEAR_CUFT_PER_BA_UNIT,
            baseline.volume_bdft + increment * LINEAR_BDFT_PER_BA_UNIT,
        )


GrowthModel = Union[ExponentialGrowth, LogisticGrowth, LinearGrowth]

_MODEL_CLASSES = {
    'exponential': ExponentialGrowth,
    'logistic': LogisticGrowth,
    'linear': LinearGrowth,
}


@dataclass
class GrowthProjection:
    """A single year's growth projection."""
    year: int
    tpa: float
    basal_area: float
    volume_cuft: float
    volume_bdft: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'year': self.year,
            'tpa': self.tpa,
            'basal_area': self.basal_area,
            'volume_cuft': self.volume_cuft,
            'volume_bdft': self.volume_bdft,
        }


def create_growth_model(name: str, **overrides: float) -> GrowthModel:
    """Build a growth model by name with defaults from configuration.

    Args:
        name: 'exponential' ('exp'), 'logistic' ('log') or 'linear' ('lin')
        **overrides: Coefficients that replace the configured defaults

    Returns:
        A growth model with every coefficient set explicitly

    Raises:
        ConfigurationError: If the model name is unknown
        InvalidParameterError: If an override is not a coefficient of the model

    Example:
        >>> create_growth_model('logistic', carrying_capacity=250.0)
        LogisticGrowth(annual_rate=0.03, carrying_capacity=250.0, mortality_rate=0.005)
    """
    configured = get_config_loader().get_section(GROWTH_MODELS_FILE, 'models')

    key = name.strip().lower()
    for model_name, settings in configured.items():
        if key == model_name or key in settings.get('aliases', []):
            key = model_name
            break
    else:
        raise ConfigurationError(
            f"Unknown growth model: '{name}'. Use: {', '.join(_MODEL_CLASSES)}"
        )

    model_cls = _MODEL_CLASSES[key]
    coefficient_names = [f.name for f in fields(model_cls)]
    for param in overrides:
        if param not in coefficient_names:
            raise InvalidParameterError(
                param, overrides[param],
                f"not a coefficient of the {key} model ({', '.join(coefficient_names)})"
            )

    coefficients = {}
    for coefficient in coefficient_names:
        if coefficient in overrides:
            coefficients[coefficient] = float(overrides[coefficient])
        elif coefficient in configured[key]:
            coefficients[coefficient] = float(configured[key][coefficient])
        else:
            raise ConfigurationError(
                f"No default for '{coefficient}' of the {key} model in {GROWTH_MODELS_FILE}"
            )
    return model_cls(**coefficients)


def project_growth(
    inventory: 'ForestInventory',
    model: GrowthModel,
    years: int,
    volume_equation: Optional[VolumeEquation] = None
) -> List[GrowthProjection]:
    """Project stand growth over a number of years.

    Args:
        inventory: Inventory providing the year-0 baseline
        model: ExponentialGrowth, LogisticGrowth or LinearGrowth
        years: Number of years to project (0 yields only the baseline)
        volume_equation: Volume coefficients for the baseline volumes

    Returns:
        years + 1 projections, one per year starting at year 0

    Raises:
        InsufficientDataError: If the inventory has no plots
        InvalidParameterError: If years is negative or the model is unknown
    """
    if inventory.num_plots() == 0:
        raise InsufficientDataError("No plots available for growth projection")
    if years < 0:
        raise InvalidParameterError('years', years, "must be zero or greater")
    if not isinstance(model, tuple(_MODEL_CLASSES.values())):
        raise InvalidParameterError('model', model, "not a supported growth model")

    baseline = StandBaseline.from_inventory(inventory, volume_equation)

    projections = [GrowthProjection(
        year=0,
        tpa=baseline.tpa,
        basal_area=baseline.basal_area,
        volume_cuft=baseline.volume_cuft,
        volume_bdft=baseline.volume_bdft,
    )]

    for year in range(1, years + 1):
        tpa, ba, vol_cuft, vol_bdft = model.values_at(baseline, float(year))
        projections.append(GrowthProjection(
            year=year,
            tpa=_non_negative(tpa),
            basal_area=_non_negative(ba),
            volume_cuft=_non_negative(vol_cuft),
            volume_bdft=_non_negative(vol_bdft),
        ))

    final = projections[-1]
    log_projection_summary(logger, model.name, years, baseline.basal_area,
                           final.basal_area, baseline.tpa, final.tpa)
    return projections


def projections_to_dataframe(projections: List[GrowthProjection]) -> pd.DataFrame:
    """Growth projections as a DataFrame, one row per year."""
    columns = ['year', 'tpa', 'basal_area', 'volume_cuft', 'volume_bdft']
    return pd.DataFrame([p.to_dict() for p in projections], columns=columns)
