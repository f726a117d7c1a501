from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

SKILL_CATEGORIES = ("Programming", "Frameworks", "Tools", "Soft Skills", "Other")

UNKNOWN_SKILL = "Unknown"


@dataclass(frozen=True)
class SkillRef:
    skill_id: str | None
    name: str | None = None

    @property
    def resolved(self) -> bool:
        return self.skill_id is not None

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN_SKILL


@dataclass
class AssessmentQuestion:
    question_id: str
    question: str
    correct_answer: str
    type: str = "mcq"
    options: list[str] = field(default_factory=list)
    difficulty: str = "medium"
    points: float = 10

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], index: int = 0) -> AssessmentQuestion:
        return cls(
            question_id=str(raw.get("_id") or raw.get("id") or f"q{index + 1}"),
            question=raw.get("question", ""),
            correct_answer=raw.get("correctAnswer", raw.get("correct_answer", "")),
            type=raw.get("type", "mcq"),
            options=list(raw.get("options") or []),
            difficulty=raw.get("difficulty", "medium"),
            points=raw.get("points", 10),
        )


@dataclass
class SkillDefinition:
    skill_id: str
    name: str
    category: str = "Other"
    description: str = ""
    questions: list[AssessmentQuestion] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SkillDefinition:
        questions = raw.get("assessmentQuestions", raw.get("questions")) or []
        category = raw.get("category", "Other")
        return cls(
            skill_id=str(raw.get("_id") or raw.get("id") or raw.get("name")),
            name=raw.get("name", UNKNOWN_SKILL),
            category=category if category in SKILL_CATEGORIES else "Other",
            description=raw.get("description", ""),
            questions=[AssessmentQuestion.from_dict(q, i) for i, q in enumerate(questions)],
        )


@dataclass
class SkillProfileEntry:
    skill: Any
    last_used_date: Any
    self_rating: int = 3
    assessment_score: float = 0.0
    freshness_score: float = 0.0
    scenario_score: float = 0.0
    sci: float = 0.0
    last_assessed: datetime | None = None
    category: str = "core"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SkillProfileEntry:
        return cls(
            skill=raw.get("skillId", raw.get("skill")),
            last_used_date=raw.get("lastUsedDate", raw.get("last_used_date")),
            self_rating=raw.get("selfRating", raw.get("self_rating", 3)),
            assessment_score=raw.get("assessmentScore", raw.get("assessment_score", 0)),
            freshness_score=raw.get("freshnessScore", raw.get("freshness_score", 0)),
            scenario_score=raw.get("scenarioScore", raw.get("scenario_score", 0)),
            sci=raw.get("sci", 0),
            last_assessed=raw.get("lastAssessed", raw.get("last_assessed")),
            category=raw.get("category", "core"),
        )


@dataclass
class RequirementEntry:
    skill: Any
    minimum_sci: float | None = None
    importance: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RequirementEntry:
        minimum = raw.get("minimumSCI", raw.get("minSCI", raw.get("minimum_sci")))
        return cls(
            skill=raw.get("skillId", raw.get("skill")),
            minimum_sci=minimum,
            importance=raw.get("importance"),
        )


@dataclass
class Role:
    role_id: str
    title: str
    requirements: list[RequirementEntry] = field(default_factory=list)
    next_roles: list[Any] = field(default_factory=list)
    description: str = ""
    avg_salary: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Role:
        return cls(
            role_id=str(raw.get("_id") or raw.get("id") or raw.get("title")),
            title=raw.get("title", ""),
            requirements=[
                RequirementEntry.from_dict(item)
                for item in raw.get("requiredSkills", raw.get("requirements")) or []
            ],
            next_roles=list(raw.get("nextRoles", raw.get("next_roles")) or []),
            description=raw.get("description", ""),
            avg_salary=raw.get("avgSalary", raw.get("avg_salary")),
        )


@dataclass
class Application:
    candidate_id: str
    applied_at: datetime | None = None
    skill_match_percentage: int | None = None
    ranking: int | None = None


@dataclass
class Job:
    job_id: str
    owner_id: str
    title: str
    requirements: list[RequirementEntry] = field(default_factory=list)
    applications: list[Application] = field(default_factory=list)
    status: str = "open"
    description: str = ""


@dataclass
class Candidate:
    candidate_id: str
    name: str = "Unknown"
    email: str | None = None
    experience: float = 0.0
    skills: list[SkillProfileEntry] | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Candidate:
        profile = raw.get("profile") or {}
        skills = raw.get("skills")
        return cls(
            candidate_id=str(raw.get("_id") or raw.get("id") or raw.get("candidate_id")),
            name=profile.get("name") or raw.get("name") or "Unknown",
            email=raw.get("email"),
            experience=profile.get("experience", raw.get("experience", 0)),
            skills=None
            if skills is None
            else [SkillProfileEntry.from_dict(item) if isinstance(item, Mapping) else item for item in skills],
        )


@dataclass
class SCIBreakdown:
    assessment_score: float
    assessment_contribution: float
    freshness_score: int
    freshness_contribution: float
    scenario_score: float
    scenario_contribution: float
    weights: dict[str, float]
    last_used_date: Any = None
    days_ago: int | None = None

    @property
    def total(self) -> float:
        return self.assessment_contribution + self.freshness_contribution + self.scenario_contribution


@dataclass
class SCIResult:
    sci: float
    breakdown: SCIBreakdown


@dataclass
class SCIInterpretation:
    level: str
    color: str
    message: str


@dataclass
class GapEntry:
    skill: SkillRef
    required_sci: float
    user_sci: float
    gap: float | None = None
    exceeds: float | None = None

    @property
    def skill_name(self) -> str:
        return self.skill.display_name


@dataclass
class GapAnalysisResult:
    readiness_percentage: int
    missing_skills: list[GapEntry]
    weak_skills: list[GapEntry]
    strong_skills: list[GapEntry]
    overall_assessment: str
    band: str


@dataclass
class UpskillRecommendation:
    skill: SkillRef
    priority: str
    reason: str
    target_sci: float
    current_sci: float
    action: str

    @property
    def skill_name(self) -> str:
        return self.skill.display_name


@dataclass
class UpskillGuidance:
    skill_name: str
    current_sci: float
    freshness_score: float
    last_used_days: int | None
    recommendation: str


@dataclass
class SkillMatchItem:
    skill_name: str
    importance: float
    min_sci: float
    candidate_sci: float
    score: float
    max_score: float
    status: str
    freshness_score: float = 0.0


@dataclass
class SkillMatchResult:
    match_percentage: int
    total_score: float
    max_possible_score: float
    breakdown: list[SkillMatchItem]


@dataclass
class RankedCandidate:
    candidate_id: str
    candidate_name: str
    candidate_email: str | None
    match_percentage: int
    total_score: float
    breakdown: list[SkillMatchItem]
    experience: float
    ranking: int = 0


@dataclass
class RoleRecommendation:
    role_id: str
    title: str
    description: str
    avg_salary: str | None
    readiness_percentage: int
    missing_count: int
    weak_count: int
    strong_count: int
    overall_assessment: str
    band: str
    next_roles: list[Any] = field(default_factory=list)


@dataclass
class RoleRecommendations:
    all: list[RoleRecommendation]
    categorized: dict[str, list[RoleRecommendation]]


@dataclass
class CareerPathNode:
    role_id: str
    title: str
    description: str
    requirements: list[RequirementEntry]
    children: list[CareerPathNode] = field(default_factory=list)
    avg_salary: str | None = None
    cycle: bool = False

    def depth(self) -> int:
        return 1 + max((child.depth() for child in self.children), default=0)


@dataclass
class QuestionResult:
    question_id: str
    user_answer: str
    is_correct: bool


@dataclass
class AssessmentOutcome:
    skill_id: str
    score_percentage: float
    earned_points: float
    total_points: float
    scenario_score: float
    results: list[QuestionResult]


@dataclass
class TeamRiskReport:
    overall_risk: str
    skill_risks: list[dict[str, Any]]
    high_risk_count: int
    recommendation: str


@dataclass
class HiringAnalytics:
    total_jobs: int
    open_jobs: int
    closed_jobs: int
    total_applications: int
    avg_applications_per_job: int
    avg_candidate_match_percentage: int
    top_skills_in_demand: list[tuple[str, int]]
