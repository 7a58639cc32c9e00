from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field
from pydantic import model_validator

from app.models.common import CamelModel


class BaseContent(CamelModel):
    """Base analysis stored when a file is first analyzed."""

    title: str
    overview: str
    word_count: int
    read_time: int


class Suggestions(CamelModel):
    improvements: list[str]
    strengths: list[str]


class SummarySection(CamelModel):
    title: str
    content: str
    key_points: list[str]


class Summary(CamelModel):
    title: str
    sections: list[SummarySection]


class QuizQuestion(CamelModel):
    question: str
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)
    explanation: str

    @model_validator(mode="after")
    def answer_within_options(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError(f"correctAnswer {self.correct_answer} is out of range for {len(self.options)} options")
        return self


class Quiz(CamelModel):
    title: str
    questions: list[QuizQuestion]


class Slide(CamelModel):
    title: str
    content: str
    bullet_points: list[str]
    visual_suggestion: str


class SlideOutline(CamelModel):
    title: str
    slides: list[Slide]


class CourseSheetSection(CamelModel):
    title: str
    # Free-form: plain text, a field mapping, a list of references or of concept entries
    content: str | dict[str, Any] | list[Any]


class CourseSheet(CamelModel):
    title: str
    sections: list[CourseSheetSection]


class TPStep(CamelModel):
    step: str
    instructions: str


class TPSheetMetadata(CamelModel):
    duration: str
    level: str
    prerequisites: str


class TPSheetSection(CamelModel):
    title: str
    content: list[TPStep | str]


class TPSheet(CamelModel):
    title: str
    metadata: TPSheetMetadata
    sections: list[TPSheetSection]


class Artifact(str, Enum):
    """The six generated artifacts. Values are the wire/tab names."""

    SUGGESTIONS = "suggestions"
    SUMMARY = "summary"
    QUIZ = "quiz"
    SLIDES = "slides"
    COURSE_SHEET = "courseSheet"
    TP_SHEET = "tpSheet"

    @property
    def field_name(self) -> str:
        return ARTIFACT_FIELDS[self]


ARTIFACT_FIELDS: dict[Artifact, str] = {
    Artifact.SUGGESTIONS: "suggestions",
    Artifact.SUMMARY: "summary",
    Artifact.QUIZ: "quiz",
    Artifact.SLIDES: "slides",
    Artifact.COURSE_SHEET: "course_sheet",
    Artifact.TP_SHEET: "tp_sheet",
}


class AnalysisResult(CamelModel):
    """Accumulating set of generated artifacts for one FileRecord."""

    file_id: str
    analyzed_at: datetime
    content: BaseContent
    suggestions: Suggestions | None = None
    summary: Summary | None = None
    quiz: Quiz | None = None
    slides: SlideOutline | None = None
    course_sheet: CourseSheet | None = None
    tp_sheet: TPSheet | None = None

    def get_artifact(self, artifact: Artifact) -> CamelModel | None:
        return getattr(self, artifact.field_name)

    def missing_artifacts(self) -> list[Artifact]:
        return [artifact for artifact in Artifact if self.get_artifact(artifact) is None]

    def available_artifacts(self) -> list[Artifact]:
        return [artifact for artifact in Artifact if self.get_artifact(artifact) is not None]
