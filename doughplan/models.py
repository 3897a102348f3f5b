"""Request and result models for dough formulation."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_FRIDGE_TEMPERATURE,
    DEFAULT_PREFERMENT_HOURS,
    DEFAULT_PREFERMENT_PERCENTAGE,
    DEFAULT_ROOM_TEMPERATURE,
)
from .styles import DoughStyle, MixerType, get_style_profile


class YeastKind(str, Enum):
    FRESH = "fresh"
    INSTANT_DRY = "instant_dry"
    ACTIVE_DRY = "active_dry"
    SOURDOUGH = "sourdough"

    @property
    def conversion_factor(self) -> Optional[float]:
        """Multiplier from fresh-yeast mass, ``None`` for sourdough starter."""
        return _YEAST_FACTORS[self]


_YEAST_FACTORS: dict[YeastKind, Optional[float]] = {
    YeastKind.FRESH: 1.0,
    YeastKind.INSTANT_DRY: 0.33,
    YeastKind.ACTIVE_DRY: 0.40,
    YeastKind.SOURDOUGH: None,
}


class FermentationMethod(str, Enum):
    ROOM_TEMPERATURE = "room_temperature"
    COLD_FERMENTATION = "cold_fermentation"
    MIXED = "mixed"
    SAME_DAY = "same_day"

    @property
    def uses_fridge(self) -> bool:
        return self in (FermentationMethod.COLD_FERMENTATION, FermentationMethod.MIXED)


class PrefermentType(str, Enum):
    POOLISH = "poolish"
    BIGA = "biga"
    LIEVITO_MADRE = "lievito_madre"

    @property
    def hydration(self) -> float:
        return _PREFERMENT_TABLE[self][0]

    @property
    def yeast_percentage(self) -> float:
        """Fresh-yeast % of preferment flour."""
        return _PREFERMENT_TABLE[self][1]


_PREFERMENT_TABLE: dict[PrefermentType, tuple[float, float]] = {
    PrefermentType.POOLISH: (100.0, 0.1),
    PrefermentType.BIGA: (55.0, 0.2),
    PrefermentType.LIEVITO_MADRE: (45.0, 0.0),
}


class PrefermentSpec(BaseModel):
    type: PrefermentType = PrefermentType.POOLISH
    percentage: float = DEFAULT_PREFERMENT_PERCENTAGE
    hours: float = DEFAULT_PREFERMENT_HOURS


class ExtraIngredient(BaseModel):
    name: str
    percentage: float


class FormulationRequest(BaseModel):
    """High-level baking parameters.

    Bounds are checked by :func:`doughplan.formulation.compute_formulation` so
    that every violation is reported at once.
    """

    style: DoughStyle = DoughStyle.NEAPOLITAN
    ball_weight_grams: float = 250.0
    number_of_units: int = 1
    hydration_pct: float = 65.0
    salt_pct: float = 2.8
    oil_pct: float = 0.0
    sugar_pct: float = 0.0
    yeast_kind: YeastKind = YeastKind.FRESH
    fermentation_method: FermentationMethod = FermentationMethod.ROOM_TEMPERATURE
    total_fermentation_hours: float = 24.0
    room_temp_c: float = DEFAULT_ROOM_TEMPERATURE
    fridge_temp_c: float = DEFAULT_FRIDGE_TEMPERATURE

    mixer_type: Optional[MixerType] = None
    flour_temp_c: Optional[float] = None
    preferment_temp_c: Optional[float] = None
    flour_strength_w: Optional[int] = None
    flour_protein_pct: Optional[float] = None
    water_hardness_ppm: Optional[float] = None
    water_ph: Optional[float] = None
    altitude_m: Optional[float] = None
    humidity_pct: Optional[float] = None
    weather_temp_c: Optional[float] = None
    weather_humidity_pct: Optional[float] = None
    preferment: Optional[PrefermentSpec] = None
    extras: list[ExtraIngredient] = Field(default_factory=list)
    yeast_pct_override: Optional[float] = None
    starter_grams: Optional[float] = None
    autolyse_minutes: Optional[int] = None

    @classmethod
    def for_style(cls, style: DoughStyle, **overrides) -> "FormulationRequest":
        """Request pre-filled with the style's default hydration, salt, oil, sugar and timing."""
        profile = get_style_profile(style)
        values = {
            "style": style,
            "ball_weight_grams": float(profile.default_ball_weight),
            "hydration_pct": profile.default_hydration,
            "salt_pct": profile.default_salt,
            "oil_pct": profile.default_oil,
            "sugar_pct": profile.default_sugar,
            "total_fermentation_hours": float(profile.default_fermentation_hours),
        }
        values.update(overrides)
        return cls(**values)

    @property
    def total_dough_grams(self) -> float:
        return self.ball_weight_grams * self.number_of_units

    @property
    def wants_ddt(self) -> bool:
        return (
            self.mixer_type is not None
            or self.flour_temp_c is not None
            or self.preferment_temp_c is not None
        )


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Ingredients(_Frozen):
    flour: float
    water: float
    salt: float
    yeast: float
    oil: float = 0.0
    sugar: float = 0.0
    extras: dict[str, float] = Field(default_factory=dict)

    def total(self) -> float:
        return (
            self.flour
            + self.water
            + self.salt
            + self.yeast
            + self.oil
            + self.sugar
            + sum(self.extras.values())
        )


class BakerPercentages(_Frozen):
    flour: float = 100.0
    water: float
    salt: float
    yeast: float
    oil: float = 0.0
    sugar: float = 0.0
    extras: dict[str, float] = Field(default_factory=dict)


class PrefermentSplit(_Frozen):
    type: PrefermentType
    flour: float
    water: float
    yeast: float
    hours: float


class MainDough(_Frozen):
    flour: float
    water: float
    salt: float
    yeast: float
    oil: float = 0.0
    sugar: float = 0.0
    extras: dict[str, float] = Field(default_factory=dict)


class DDTResult(_Frozen):
    target_dough_temp_c: float
    target_water_temp_c: float
    room_temp_c: float
    flour_temp_c: float
    preferment_temp_c: Optional[float] = None
    mixer_type: MixerType
    friction_factor: float
    friction_heat_c: float
    mixing_minutes: int
    formula_trace: str
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class EnvironmentalCorrections(_Frozen):
    hydration_adjustment: float = 0.0
    yeast_adjustment_pct: float = 0.0
    fermentation_adjustment_pct: float = 0.0
    estimated_pressure_hpa: float
    effective_humidity_pct: float
    recommendations: list[str] = Field(default_factory=list)


class FlourAnalysis(_Frozen):
    strength_w: Optional[int] = None
    protein_pct: Optional[float] = None
    suggested_min_hydration: Optional[float] = None
    suggested_max_hydration: Optional[float] = None
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class WaterAnalysis(_Frozen):
    hardness_ppm: Optional[float] = None
    ph: Optional[float] = None
    fermentation_modifier: float = 1.0
    gluten_modifier: float = 1.0
    effects: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class FormulationResult(_Frozen):
    """Absolute masses plus everything the schedule generator needs."""

    total_dough_grams: float
    ingredients: Ingredients
    percentages: BakerPercentages
    preferment: Optional[PrefermentSplit] = None
    main_dough: Optional[MainDough] = None
    ddt: Optional[DDTResult] = None
    environment: EnvironmentalCorrections
    flour_analysis: FlourAnalysis
    water_analysis: WaterAnalysis
    yeast_kind: YeastKind
    fresh_yeast_pct: float
    kinetic_hours: float
    tips: list[str] = Field(default_factory=list)

    style: DoughStyle
    fermentation_method: FermentationMethod
    total_fermentation_hours: float
    room_temp_c: float
    fridge_temp_c: float
    hydration_pct: float
    number_of_units: int
    ball_weight_grams: float
    autolyse_minutes: Optional[int] = None
