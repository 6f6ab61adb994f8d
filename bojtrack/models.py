from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TestCase(BaseModel):
    input: str
    output: str

    model_config = ConfigDict(extra="forbid")


class ScrapedProblem(BaseModel):
    problem_id: int
    title: str = Field(min_length=1)
    description: str = ""
    input_format: str = ""
    output_format: str = ""
    test_cases: list[TestCase] = Field(default_factory=list)
    time_limit: str | None = None
    memory_limit: str | None = None
    submissions: str | None = None
    accepted: str | None = None
    accepted_users: str | None = None
    accepted_rate: str | None = None

    model_config = ConfigDict(extra="forbid")


class SearchResult(BaseModel):
    problem_id: int = Field(gt=0)
    title: str = Field(min_length=1)
    level: int | None = Field(default=None, ge=0, le=31)
    solved_count: int | None = None
    average_tries: float | None = None

    model_config = ConfigDict(extra="forbid")


class SearchResults(BaseModel):
    problems: list[SearchResult] = Field(default_factory=list)
    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)

    model_config = ConfigDict(extra="forbid")


class WorkbookProblem(BaseModel):
    problem_id: int
    title: str
    order: int
    level: int | None = Field(default=None, ge=0, le=31)

    model_config = ConfigDict(extra="forbid")


class Workbook(BaseModel):
    id: int
    title: str
    problems: list[WorkbookProblem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(extra="forbid")


class ProblemStatus(str, Enum):
    UNSOLVED = "unsolved"
    SOLVED = "solved"
    FAILED = "failed"


class ProblemProgress(BaseModel):
    status: ProblemStatus = ProblemStatus.UNSOLVED
    attempt_count: int = Field(default=0, ge=0)
    last_attempted_at: datetime | None = None

    model_config = ConfigDict(
        extra="ignore", alias_generator=to_camel, populate_by_name=True
    )


class WorkbookProgress(BaseModel):
    """On-disk progress record for one workbook.

    Serialized with camelCase keys, problem ids as JSON object keys and
    ISO-8601 timestamps::

        {"workbookId": 1, "problems": {"1000": {"status": "solved",
         "attemptCount": 1, "lastAttemptedAt": "..."}}, "updatedAt": "..."}
    """

    workbook_id: int
    problems: dict[int, ProblemProgress] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(
        extra="ignore", alias_generator=to_camel, populate_by_name=True
    )


class ProgressStats(BaseModel):
    total: int = 0
    solved: int = 0
    failed: int = 0
    unsolved: int = 0
    percentage: int = 0

    model_config = ConfigDict(extra="forbid")


class SolvedAcTag(BaseModel):
    key: str

    model_config = ConfigDict(extra="ignore")


class SolvedAcProblem(BaseModel):
    problem_id: int
    title_ko: str = ""
    level: int = Field(default=0, ge=0, le=31)
    tags: list[SolvedAcTag] = Field(default_factory=list)

    model_config = ConfigDict(
        extra="ignore", alias_generator=to_camel, populate_by_name=True
    )


class ScrapingResult(BaseModel):
    success: bool
    error: str

    model_config = ConfigDict(extra="forbid")


class ProblemResult(ScrapingResult):
    problem_id: int = 0
    problem: ScrapedProblem | None = None

    model_config = ConfigDict(extra="forbid")


class SearchPageResult(ScrapingResult):
    query: str = ""
    results: SearchResults | None = None

    model_config = ConfigDict(extra="forbid")


class WorkbookResult(ScrapingResult):
    workbook_id: int = 0
    workbook: Workbook | None = None
    stats: ProgressStats | None = None
    next_problem: WorkbookProblem | None = None

    model_config = ConfigDict(extra="forbid")


class ProgressResult(ScrapingResult):
    workbook_id: int = 0
    progress: WorkbookProgress | None = None

    model_config = ConfigDict(extra="forbid")


class ScraperConfig(BaseModel):
    timeout_seconds: float = 15.0
    batch_size: int = Field(default=10, ge=1)
    batch_delay_seconds: float = Field(default=0.2, ge=0)

    model_config = ConfigDict(extra="forbid")
