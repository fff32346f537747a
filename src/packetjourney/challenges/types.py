"""Challenge type definitions."""

from enum import Enum
from http import HTTPStatus
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    model_validator,
)
from pydantic.alias_generators import to_camel


class ChallengeType(str, Enum):
    """Types of challenges."""

    SELECT_METHOD = "SELECT_METHOD"
    PICK_ENDPOINT = "PICK_ENDPOINT"
    SELECT_QUERY = "SELECT_QUERY"
    STATUS_CODE_MATCH = "STATUS_CODE_MATCH"
    MIDDLEWARE_SEQUENCE = "MIDDLEWARE_SEQUENCE"
    ADD_HEADERS = "ADD_HEADERS"


METHOD_DESCRIPTIONS: dict[str, str] = {
    "GET": "Retrieve data from server",
    "POST": "Send data to server",
    "PUT": "Update existing data",
    "DELETE": "Remove data from server",
    "PATCH": "Partially update data",
}

HEADER_SUGGESTIONS: dict[str, list[str]] = {
    "Authorization": ["Bearer ", "Basic ", "Token "],
    "Content-Type": ["application/json", "text/html", "multipart/form-data"],
    "Accept": ["application/json", "*/*", "text/html"],
}

# One accepted value per well-known header
CANONICAL_HEADER_VALUES: dict[str, str] = {
    "Authorization": "Bearer <token>",
    "Content-Type": "application/json",
    "Accept": "application/json",
}

AUTHORIZATION_SCHEMES = ("Bearer ", "Basic ", "Token ")


class Option(BaseModel):
    """One selectable option of a challenge."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: Any
    description: Optional[str] = Field(default=None)


class GradingResult(BaseModel):
    """Outcome of grading one submission.

    The shape is the same for every challenge type so the runtime, the
    sequencer and the tracker never look at variant internals.
    """

    model_config = ConfigDict(frozen=True)

    correct: bool
    answer_given: Any

    def to_event(self) -> dict[str, Any]:
        """Return the ``{"correct", "answer"}`` payload emitted to the UI."""
        return {"correct": self.correct, "answer": self.answer_given}


class BaseChallenge(BaseModel):
    """Fields and grading shared by every challenge variant."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    type: ChallengeType
    question: str = Field(min_length=1)
    explanation: str = Field(default="")

    @property
    def options(self) -> list[Option]:
        """Options offered to the learner, in display order."""
        raise NotImplementedError

    @property
    def correct_value(self) -> Any:
        """The value that grades as correct."""
        raise NotImplementedError

    def accepts(self, value: Any) -> bool:
        """Return whether ``value`` is a legal selection for this challenge."""
        return any(option.value == value for option in self.options)

    def normalize(self, value: Any) -> Any:
        """Coerce a legal selection into its canonical form."""
        return value

    def grade(self, selected: Any) -> GradingResult:
        """Grade a selection against the correct value.

        Pure function of ``correct_value`` and ``selected``.
        """
        return GradingResult(
            correct=self.normalize(selected) == self.correct_value,
            answer_given=selected,
        )


class ChoiceChallenge(BaseChallenge):
    """Pick one string out of several (method, endpoint or query)."""

    type: Literal["SELECT_METHOD", "PICK_ENDPOINT", "SELECT_QUERY"]
    choices: list[str] = Field(validation_alias=AliasChoices("choices", "options"))
    answer: str

    @model_validator(mode="after")
    def check_answer_offered(self) -> "ChoiceChallenge":
        if len(self.choices) < 2:
            raise ValueError("a choice challenge needs at least two options")
        if len(set(self.choices)) != len(self.choices):
            raise ValueError("options must be unique")
        if self.answer not in self.choices:
            raise ValueError(f"answer {self.answer!r} is not among the options")
        return self

    @property
    def options(self) -> list[Option]:
        descriptions = METHOD_DESCRIPTIONS if self.type == ChallengeType.SELECT_METHOD else {}
        return [
            Option(label=choice, value=choice, description=descriptions.get(choice))
            for choice in self.choices
        ]

    @property
    def correct_value(self) -> str:
        return self.answer

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str) and value in self.choices


class StatusCodeChallenge(BaseChallenge):
    """Match a scenario to the HTTP status code a server should return."""

    type: Literal["STATUS_CODE_MATCH"]
    question: str = Field(min_length=1, validation_alias=AliasChoices("question", "scenario"))
    status_codes: list[int]
    correct_code: int

    @model_validator(mode="after")
    def check_codes(self) -> "StatusCodeChallenge":
        if len(self.status_codes) < 2:
            raise ValueError("a status code challenge needs at least two codes")
        if len(set(self.status_codes)) != len(self.status_codes):
            raise ValueError("status codes must be unique")
        for code in self.status_codes:
            if not 100 <= code <= 599:
                raise ValueError(f"{code} is not an HTTP status code")
        if self.correct_code not in self.status_codes:
            raise ValueError(f"correct code {self.correct_code} is not among the status codes")
        return self

    @property
    def options(self) -> list[Option]:
        return [Option(label=status_label(code), value=code) for code in self.status_codes]

    @property
    def correct_value(self) -> int:
        return self.correct_code

    def accepts(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and value in self.status_codes


class SequenceChallenge(BaseChallenge):
    """Put steps (e.g. middleware) into execution order.

    Option values are step indices in authored order; an answer is a full
    ordering of those indices.
    """

    type: Literal["MIDDLEWARE_SEQUENCE"]
    question: str = Field(
        default="Order the middleware in the correct execution sequence",
        min_length=1,
    )
    steps: list[str]
    correct_order: list[int]

    @model_validator(mode="after")
    def check_permutation(self) -> "SequenceChallenge":
        if len(self.steps) < 2:
            raise ValueError("a sequence challenge needs at least two steps")
        if len(set(self.steps)) != len(self.steps):
            raise ValueError("steps must be unique")
        if sorted(self.correct_order) != list(range(len(self.steps))):
            raise ValueError("correct order must be a permutation of the step indices")
        return self

    @property
    def options(self) -> list[Option]:
        return [Option(label=step, value=index) for index, step in enumerate(self.steps)]

    @property
    def correct_value(self) -> list[int]:
        return list(self.correct_order)

    def accepts(self, value: Any) -> bool:
        if not isinstance(value, (list, tuple)):
            return False
        if any(not isinstance(item, int) or isinstance(item, bool) for item in value):
            return False
        return sorted(value) == list(range(len(self.steps)))

    def normalize(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return list(value)
        return value


class HeadersChallenge(BaseChallenge):
    """Fill in the values of required HTTP request headers.

    An answer is a header -> value mapping. Header names match
    case-insensitively.
    """

    type: Literal["ADD_HEADERS"]
    question: str = Field(
        default="Add the required HTTP headers to complete the request",
        min_length=1,
    )
    required_headers: list[str]
    header_hints: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_headers(self) -> "HeadersChallenge":
        if not self.required_headers:
            raise ValueError("at least one header is required")
        lowered = [header.lower() for header in self.required_headers]
        if len(set(lowered)) != len(lowered):
            raise ValueError("required headers must be unique")
        unknown = {hint.lower() for hint in self.header_hints} - set(lowered)
        if unknown:
            raise ValueError(f"hints given for headers that are not required: {sorted(unknown)}")
        return self

    @property
    def options(self) -> list[Option]:
        return [
            Option(label=header, value=header, description=self.header_hints.get(header))
            for header in self.required_headers
        ]

    @property
    def correct_value(self) -> dict[str, str]:
        return {
            header: CANONICAL_HEADER_VALUES.get(header, "example")
            for header in self.required_headers
        }

    def accepts(self, value: Any) -> bool:
        """A selection needs a non-blank value for every required header."""
        if not isinstance(value, dict):
            return False
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
            return False
        given = self.normalize(value)
        return all(given.get(header.lower(), "").strip() for header in self.required_headers)

    def normalize(self, value: Any) -> dict[str, str]:
        return {str(key).lower(): str(item) for key, item in value.items()}

    def grade(self, selected: Any) -> GradingResult:
        given = self.normalize(selected) if self.accepts(selected) else {}
        correct = bool(given) and all(
            header_value_valid(header, given.get(header.lower(), ""))
            for header in self.required_headers
        )
        return GradingResult(correct=correct, answer_given=selected)


def header_value_valid(header: str, value: str) -> bool:
    """Check one header value against its rule."""
    if not value.strip():
        return False
    if header.lower() == "authorization":
        return value.startswith(AUTHORIZATION_SCHEMES)
    return True


def status_label(code: int) -> str:
    """Return e.g. ``401 Unauthorized`` for a status code."""
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


Challenge = Annotated[
    Union[ChoiceChallenge, StatusCodeChallenge, SequenceChallenge, HeadersChallenge],
    Field(discriminator="type"),
]

_challenge_adapter: TypeAdapter[Challenge] = TypeAdapter(Challenge)


def parse_challenge(data: dict) -> BaseChallenge:
    """Create a challenge from a dictionary.

    Accepts either a flat mapping or the ``{"type": ..., "config": {...}}``
    layout used by stored quest content.

    Raises:
        pydantic.ValidationError: If the challenge is malformed or
            internally inconsistent.
    """
    return _challenge_adapter.validate_python(flatten_challenge_data(data))


def flatten_challenge_data(data: Any) -> Any:
    """Merge a nested ``config`` mapping into the top level."""
    if isinstance(data, dict) and isinstance(data.get("config"), dict):
        return {"type": data.get("type"), **data["config"]}
    return data
