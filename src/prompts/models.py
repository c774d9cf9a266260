"""Pydantic v2 models for the prompt generation engine.

Defines the records that flow between the registry, selector, renderer,
scorer and facade: template descriptors and variants, the render context,
project intent and selection input, feedback, and the render result.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

KNOWN_ARCHETYPES: tuple[str, ...] = ("ecommerce", "saas", "blog", "portfolio", "dashboard")


class UserExperience(str, Enum):
    """Experience level of the developer the prompt is written for."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class DevelopmentPhase(str, Enum):
    """Where the project currently is in its lifecycle."""
    PLANNING = "planning"
    DEVELOPMENT = "development"
    OPTIMIZATION = "optimization"


class VariantFocus(str, Enum):
    """What a template variant emphasises."""
    IMPLEMENTATION = "implementation"
    ARCHITECTURE = "architecture"
    BEST_PRACTICES = "best-practices"
    TROUBLESHOOTING = "troubleshooting"


class FeedbackUsage(str, Enum):
    """How useful a generated prompt turned out to be."""
    HELPFUL = "helpful"
    PARTIALLY_HELPFUL = "partially_helpful"
    NOT_HELPFUL = "not_helpful"


class Complexity(str, Enum):
    """Estimated project complexity."""
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

class TemplateDescriptor(BaseModel):
    """The primary template registered for one archetype."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Template id, e.g. 'ecommerce-main'")
    archetype: str = Field(..., description="Lowercase archetype key")
    body_path: str = Field(..., description="Store path of the main body")
    declared_variables: frozenset[str] = Field(
        default_factory=frozenset, description="Distinct variable names referenced by the body"
    )
    description: str = Field(default="", description="Human-readable summary")


class TemplateVariant(BaseModel):
    """An alternative guidance body for an archetype.

    ``weight`` is adjusted by feedback and validated on assignment so it can
    never leave ``[0.1, 2.0]``.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    description: str = ""
    target_audience: UserExperience = UserExperience.INTERMEDIATE
    focus: VariantFocus = VariantFocus.IMPLEMENTATION
    body_path: str
    weight: float = Field(default=1.0, ge=0.1, le=2.0)


# ---------------------------------------------------------------------------
# Render context
# ---------------------------------------------------------------------------

class PromptContext(BaseModel):
    """Named values substituted into a template body.

    The required fields are typed; anything else passed at construction is
    kept as an extra and reaches the renderer untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    project_name: str
    project_type: str
    complexity_level: str
    detected_features: list[str] = Field(default_factory=list)
    tech_stack: Union[str, list[str]] = ""
    tool_version: str
    current_date: str

    has_payment_feature: Optional[bool] = None
    has_billing_feature: Optional[bool] = None
    has_search_feature: Optional[bool] = None

    def as_render_dict(self) -> dict[str, Any]:
        """Return the context as a plain ordered mapping, extras included."""
        return self.model_dump()


# ---------------------------------------------------------------------------
# Selection input
# ---------------------------------------------------------------------------

class ProjectIntent(BaseModel):
    """What the user appears to want to build."""
    archetype: str = Field(..., description="Archetype key, e.g. 'saas'")
    features: list[str] = Field(default_factory=list)
    complexity: Complexity = Complexity.MEDIUM
    confidence: int = Field(default=0, ge=0, le=100)
    reasoning: str = ""
    tech_preferences: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class TemplateFeedback(BaseModel):
    """A user's rating of a generated prompt."""
    variant_id: str
    rating: int = Field(..., ge=1, le=5)
    usage: FeedbackUsage
    comments: str = ""


class SelectionContext(BaseModel):
    """Everything the variant selector looks at."""
    project_intent: ProjectIntent
    user_experience: UserExperience = UserExperience.INTERMEDIATE
    development_phase: DevelopmentPhase = DevelopmentPhase.DEVELOPMENT
    previous_feedback: list[TemplateFeedback] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class RenderMetadata(BaseModel):
    """Metadata attached to every render result."""

    model_config = ConfigDict(frozen=True)

    archetype: str
    detected_features: list[str] = Field(default_factory=list)
    confidence_score: int = Field(default=0, ge=0, le=100)
    template_id: str
    generated_at: str = Field(..., description="ISO-8601 timestamp")


class RenderResult(BaseModel):
    """Outcome of a generation: either a prompt or an error, never both."""

    model_config = ConfigDict(frozen=True)

    success: bool
    prompt: Optional[str] = None
    error: Optional[str] = None
    metadata: RenderMetadata

    @model_validator(mode="after")
    def _prompt_xor_error(self) -> "RenderResult":
        if self.success and (self.prompt is None or self.error is not None):
            raise ValueError("a successful result carries a prompt and no error")
        if not self.success and (self.error is None or self.prompt is not None):
            raise ValueError("a failed result carries an error and no prompt")
        return self
