from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, conint, confloat, field_validator, model_validator

BUILTIN_FREQUENCY_KEYS = ("one_time", "weekly", "biweekly", "monthly")
DEFAULT_FREQUENCY_KEY = "one_time"

NonNegativeMajor = Annotated[float, Field(ge=0)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)


class TenantContext(_Frozen):
    currency: str = Field(default="SEK", min_length=3, max_length=3)
    vat_rate_percent: confloat(ge=0, le=100) = 25.0
    tax_deduction_enabled: bool = False
    tax_deduction_rate_percent: confloat(gt=0, le=100) = 50.0
    tax_deduction_cap_major: Optional[NonNegativeMajor] = None

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return value.upper()


class Addon(_Frozen):
    key: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    kind: Literal["fixed", "per_unit"] = "fixed"
    amount_major: NonNegativeMajor
    tax_deduction_eligible: bool = False


class Fee(_Frozen):
    key: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    amount_major: NonNegativeMajor
    tax_deduction_eligible: bool = False


class BooleanCondition(_Frozen):
    kind: Literal["boolean"] = "boolean"
    expected_value: bool = True
    answer_key: str = Field(min_length=1)


class ModifierEffect(_Frozen):
    applies_to: Literal["base_after_frequency", "subtotal_before_modifiers"] = "subtotal_before_modifiers"
    mode: Literal["percent", "fixed"]
    magnitude: NonNegativeMajor
    direction: Literal["increase", "decrease"] = "increase"
    tax_deduction_eligible: bool = False
    label: Optional[str] = None


class ModifierRule(_Frozen):
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    condition: BooleanCondition
    effect: ModifierEffect


class FrequencyOption(_Frozen):
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    multiplier: confloat(ge=1)


class QuestionOption(_Frozen):
    value: str = Field(min_length=1)
    label: Optional[str] = None
    impact: Optional[ModifierEffect] = None


class CheckboxQuestion(_Frozen):
    type: Literal["checkbox"]
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    required: bool = False
    impact: Optional[ModifierEffect] = None


class RadioQuestion(_Frozen):
    type: Literal["radio"]
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    required: bool = False
    options: List[QuestionOption] = Field(min_length=1)


class CheckboxMultiQuestion(_Frozen):
    type: Literal["checkbox_multi"]
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    required: bool = False
    options: List[QuestionOption] = Field(min_length=1)


class TextQuestion(_Frozen):
    type: Literal["text"]
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    required: bool = False
    pattern: Optional[str] = None


DynamicQuestion = Annotated[
    Union[CheckboxQuestion, RadioQuestion, CheckboxMultiQuestion, TextQuestion],
    Field(discriminator="type"),
]


class _ServiceBase(_Frozen):
    name: str = Field(min_length=1)
    frequency_multipliers: Dict[str, NonNegativeMajor] = Field(
        default_factory=lambda: {"one_time": 1.0, "weekly": 1.0, "biweekly": 1.15, "monthly": 1.4}
    )
    frequency_options: List[FrequencyOption] = Field(default_factory=list)
    vat_rate_percent: Optional[confloat(ge=0, le=100)] = None
    tax_deduction_eligible: bool = True
    addons: List[Addon] = Field(default_factory=list)
    fees: List[Fee] = Field(default_factory=list)
    modifiers: List[ModifierRule] = Field(default_factory=list)
    dynamic_questions: List[DynamicQuestion] = Field(default_factory=list)
    minimum_charge_major: NonNegativeMajor = 0.0

    @field_validator("frequency_multipliers")
    @classmethod
    def require_builtin_frequencies(cls, value: Dict[str, float]) -> Dict[str, float]:
        missing = [key for key in BUILTIN_FREQUENCY_KEYS if key not in value]
        if missing:
            raise ValueError(f"frequency_multipliers is missing {', '.join(missing)}")
        too_low = [key for key, multiplier in value.items() if key not in BUILTIN_FREQUENCY_KEYS and multiplier < 1]
        if too_low:
            raise ValueError(f"custom frequency multipliers must be at least 1: {', '.join(too_low)}")
        return value

    @model_validator(mode="after")
    def check_unique_keys(self) -> "_ServiceBase":
        for field in ("addons", "fees", "modifiers"):
            keys = [item.key for item in getattr(self, field)]
            if len(keys) != len(set(keys)):
                raise ValueError(f"{field} must have unique keys")
        return self


class AreaPriceTier(_Frozen):
    min: NonNegativeMajor
    max: confloat(gt=0)
    price: confloat(gt=0)


class AreaRateTier(_Frozen):
    min: NonNegativeMajor
    max: confloat(gt=0)
    rate_per_sqm: confloat(gt=0)


class AreaHoursTier(_Frozen):
    min: NonNegativeMajor
    max: confloat(gt=0)
    hours: confloat(gt=0)


class WindowType(_Frozen):
    key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price_per_unit: confloat(gt=0)


class RoomType(_Frozen):
    key: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price_per_room: confloat(gt=0)


class FixedTierService(_ServiceBase):
    model: Literal["fixed_tier"]
    tiers: List[AreaPriceTier] = Field(min_length=1)


class TieredMultiplierService(_ServiceBase):
    model: Literal["tiered_multiplier"]
    tiers: List[AreaRateTier] = Field(min_length=1)


class UniversalMultiplierService(_ServiceBase):
    model: Literal["universal_multiplier"]
    rate_per_sqm: confloat(gt=0)


class WindowsService(_ServiceBase):
    model: Literal["windows"]
    window_types: List[WindowType] = Field(min_length=1)


class HourlyAreaService(_ServiceBase):
    model: Literal["hourly_area"]
    hourly_rate: confloat(gt=0)
    area_to_hours: List[AreaHoursTier] = Field(min_length=1)


class PerRoomService(_ServiceBase):
    model: Literal["per_room"]
    room_types: List[RoomType] = Field(min_length=1)


ServiceConfig = Annotated[
    Union[
        FixedTierService,
        TieredMultiplierService,
        UniversalMultiplierService,
        WindowsService,
        HourlyAreaService,
        PerRoomService,
    ],
    Field(discriminator="model"),
]


class QuoteInputs(_Frozen):
    area: Optional[NonNegativeMajor] = None
    rooms: Dict[str, conint(ge=0)] = Field(default_factory=dict)
    window_counts: Dict[str, conint(ge=0)] = Field(default_factory=dict)


class SelectedAddon(_Frozen):
    key: str
    quantity: conint(gt=0) = 1


class Coupon(_Frozen):
    code: Optional[str] = None
    kind: Literal["percent", "fixed"]
    magnitude: NonNegativeMajor


class QuoteOptions(_Frozen):
    """Customer-facing part of a quote request, without the service config."""

    tenant: Optional[TenantContext] = None
    frequency_key: str = DEFAULT_FREQUENCY_KEY
    inputs: QuoteInputs = Field(default_factory=QuoteInputs)
    selected_addons: List[SelectedAddon] = Field(default_factory=list)
    apply_tax_deduction: bool = False
    coupon: Optional[Coupon] = None
    answers: Dict[str, Any] = Field(default_factory=dict)


class QuoteRequest(QuoteOptions):
    tenant: TenantContext = Field(default_factory=TenantContext)
    service: ServiceConfig


class QuoteLine(BaseModel):
    key: str
    label: str
    tax_deduction_eligible: bool = False
    amount_minor: int


class QuoteBreakdown(BaseModel):
    currency: str
    model: str
    frequency_key: str
    lines: List[QuoteLine]
    subtotal_ex_vat_minor: int
    vat_minor: int
    tax_deduction_minor: int
    discount_minor: int
    total_minor: int


class ServiceSummary(BaseModel):
    service_id: str
    name: str
    model: str
    frequency_keys: List[str]
    addon_keys: List[str]


class ServiceCatalogResponse(BaseModel):
    catalog_id: str
    catalog_version: str
    config_hash: str
    services: List[ServiceSummary]
