"""Quest, layer and listing models."""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..challenges.types import Challenge, flatten_challenge_data


class Difficulty(str, Enum):
    """Quest difficulty."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def from_level(cls, level: int) -> "Difficulty":
        """Map the 1-5 numeric scale used by stored content."""
        if not 1 <= level <= 5:
            raise ValueError(f"difficulty level must be between 1 and 5, got {level}")
        if level <= 2:
            return cls.BEGINNER
        if level == 3:
            return cls.INTERMEDIATE
        return cls.ADVANCED


class LayerKind(str, Enum):
    """Where in the stack a layer takes place."""

    BROWSER = "BROWSER"
    NETWORK = "NETWORK"
    API = "API"
    DATABASE = "DATABASE"


class Layer(BaseModel):
    """One step of a quest, presenting exactly one challenge."""

    model_config = ConfigDict(frozen=True)

    id: str
    index: int = Field(ge=0, validation_alias=AliasChoices("index", "order"))
    kind: LayerKind = Field(default=LayerKind.BROWSER, validation_alias=AliasChoices("kind", "type"))
    challenge: Challenge
    time_limit: Optional[int] = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("time_limit", "timeLimit"),
        description="Seconds",
    )

    @field_validator("challenge", mode="before")
    @classmethod
    def flatten_config(cls, value):
        return flatten_challenge_data(value)


class Quest(BaseModel):
    """A learning unit made of ordered layers."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1, validation_alias=AliasChoices("title", "name"))
    description: str = Field(default="")
    difficulty: Difficulty = Field(default=Difficulty.BEGINNER)
    tags: list[str] = Field(default_factory=list)
    layers: list[Layer]

    @field_validator("difficulty", mode="before")
    @classmethod
    def coerce_level(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return Difficulty.from_level(value)
        return value

    @model_validator(mode="after")
    def check_layer_order(self) -> "Quest":
        if not self.layers:
            raise ValueError("a quest must have at least one layer")
        indices = [layer.index for layer in self.layers]
        if indices != list(range(len(self.layers))):
            raise ValueError(f"layer indices must be 0..{len(self.layers) - 1} in order, got {indices}")
        ids = [layer.id for layer in self.layers]
        if len(set(ids)) != len(ids):
            raise ValueError("layer ids must be unique")
        return self

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def last_index(self) -> int:
        return len(self.layers) - 1

    def get_layer(self, index: int) -> Optional[Layer]:
        """Return the layer at ``index`` or None."""
        if 0 <= index < len(self.layers):
            return self.layers[index]
        return None

    def summary(self) -> "QuestSummary":
        return QuestSummary(
            id=self.id,
            title=self.title,
            description=self.description,
            difficulty=self.difficulty,
            tags=list(self.tags),
            layer_count=self.layer_count,
        )


class QuestSummary(BaseModel):
    """Listing entry for a quest."""

    id: str
    title: str
    description: str = Field(default="")
    difficulty: Difficulty
    tags: list[str] = Field(default_factory=list)
    layer_count: int


class QuestFilter(BaseModel):
    """Filter and page for quest listings."""

    difficulty: Optional[Difficulty] = Field(default=None)
    search: Optional[str] = Field(default=None)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=50)


class QuestPage(BaseModel):
    """One page of quest summaries."""

    items: list[QuestSummary]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.limit))
