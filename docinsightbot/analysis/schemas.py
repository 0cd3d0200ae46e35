"""Pydantic schemas for the analysis output contract.

Every field has a default, and every text/list field goes through the
lenient coercers in :mod:`docinsightbot.fields`, so a decoded
:class:`AnalysisResult` never has a missing or null field: unknown text is
the sentinel string and unknown lists are empty.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List

from pydantic import AliasChoices, BeforeValidator, ConfigDict, Field

from ..augmentation.schemas import OpportunityRecord
from ..fields import SENTINEL, Priority, Text, TextList, WireModel, choice, coerce_object, object_list


class DegradationTier(str, Enum):
    NONE = "None"
    PARSE_FAILURE = "ParseFailure"
    INVOCATION_FAILURE = "InvocationFailure"


Difficulty = Annotated[str, BeforeValidator(choice(["Low", "Medium", "High"], "Medium"))]
RecommendationCategory = Annotated[
    str, BeforeValidator(choice(["Financial", "Academic", "Application", "Compliance"], "Application"))
]


class RawDocument(WireModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)
    file_name: str = ""
    document_type: str = "offer_letter"


class InstitutionInfo(WireModel):
    name: Text = SENTINEL
    location: Text = SENTINEL
    program: Text = SENTINEL
    tuition: Text = SENTINEL
    duration: Text = SENTINEL
    start_date: Text = SENTINEL
    campus: Text = SENTINEL
    study_mode: Text = SENTINEL


class ProfileAnalysis(WireModel):
    academic_standing: Text = SENTINEL
    gpa: Text = SENTINEL
    financial_status: Text = SENTINEL
    relevant_skills: TextList = Field(default_factory=list)
    strengths: TextList = Field(default_factory=list)
    weaknesses: TextList = Field(default_factory=list)
    improvement_areas: TextList = Field(default_factory=list)


class CostSavingStrategy(WireModel):
    strategy: Text = SENTINEL
    description: Text = SENTINEL
    potential_savings: Text = SENTINEL
    implementation_steps: TextList = Field(default_factory=list)
    timeline: Text = SENTINEL
    difficulty: Difficulty = "Medium"


class FinancialBreakdown(WireModel):
    total_cost: Text = SENTINEL
    tuition_fees: Text = SENTINEL
    other_fees: Text = SENTINEL
    living_expenses: Text = SENTINEL
    scholarship_summary: Text = SENTINEL
    net_cost: Text = SENTINEL
    payment_schedule: TextList = Field(default_factory=list)
    funding_gaps: TextList = Field(default_factory=list)


class Recommendation(WireModel):
    category: RecommendationCategory = "Application"
    priority: Priority = "Medium"
    recommendation: Text = SENTINEL
    rationale: Text = SENTINEL
    implementation_steps: TextList = Field(default_factory=list)
    timeline: Text = SENTINEL
    expected_outcome: Text = SENTINEL


class NextStep(WireModel):
    step: Text = SENTINEL
    description: Text = SENTINEL
    deadline: Text = SENTINEL
    priority: Priority = "Medium"


class TermsAndConditions(WireModel):
    academic_requirements: TextList = Field(default_factory=list)
    financial_obligations: TextList = Field(default_factory=list)
    enrollment_conditions: TextList = Field(default_factory=list)
    compliance_requirements: TextList = Field(default_factory=list)
    hidden_clauses: TextList = Field(default_factory=list)
    critical_deadlines: TextList = Field(default_factory=list)
    penalties: TextList = Field(default_factory=list)


class RiskAssessment(WireModel):
    high_risk_factors: TextList = Field(default_factory=list)
    financial_risks: TextList = Field(default_factory=list)
    academic_risks: TextList = Field(default_factory=list)
    compliance_risks: TextList = Field(default_factory=list)
    mitigation_strategies: TextList = Field(default_factory=list)


class DocumentAnalysis(WireModel):
    terms_and_conditions: Annotated[TermsAndConditions, BeforeValidator(coerce_object)] = Field(
        default_factory=TermsAndConditions
    )
    risk_assessment: Annotated[RiskAssessment, BeforeValidator(coerce_object)] = Field(
        default_factory=RiskAssessment
    )


Severity = Annotated[str, BeforeValidator(choice(["Critical", "Moderate", "Minor"], "Moderate"))]


class KeyFinding(WireModel):
    title: Text = SENTINEL
    description: Text = SENTINEL
    importance: Priority = "Medium"


class MissingInformation(WireModel):
    field: Text = SENTINEL
    description: Text = SENTINEL
    impact: Text = SENTINEL


class ComplianceIssue(WireModel):
    issue: Text = SENTINEL
    severity: Severity = "Moderate"
    resolution: Text = SENTINEL


class DocumentDetails(WireModel):
    """Document-specific facts (enrollment confirmations, visa letters).

    Present on every result; fields that do not apply to the document hold
    the sentinel or an empty list.
    """

    course_code: Text = SENTINEL
    end_date: Text = SENTINEL
    visa_type: Text = SENTINEL
    health_cover: Text = SENTINEL
    english_test_score: Text = SENTINEL
    institution_contact: Text = SENTINEL
    visa_obligations: Text = SENTINEL
    key_findings: Annotated[List[KeyFinding], BeforeValidator(object_list("title"))] = Field(default_factory=list)
    missing_information: Annotated[List[MissingInformation], BeforeValidator(object_list("field"))] = Field(
        default_factory=list
    )
    compliance_issues: Annotated[List[ComplianceIssue], BeforeValidator(object_list("issue"))] = Field(
        default_factory=list
    )


class AnalysisResult(WireModel):
    """The full output contract, identical for every document type."""

    document_type: str = "offer_letter"
    summary: Text = SENTINEL
    institution: Annotated[InstitutionInfo, BeforeValidator(coerce_object)] = Field(
        default_factory=InstitutionInfo,
        validation_alias=AliasChoices("institution", "universityInfo", "institutionInfo"),
    )
    profile_analysis: Annotated[ProfileAnalysis, BeforeValidator(coerce_object)] = Field(
        default_factory=ProfileAnalysis
    )
    opportunities: Annotated[List[OpportunityRecord], BeforeValidator(object_list())] = Field(
        default_factory=list
    )
    cost_saving_strategies: Annotated[List[CostSavingStrategy], BeforeValidator(object_list("strategy"))] = Field(
        default_factory=list
    )
    financial_breakdown: Annotated[FinancialBreakdown, BeforeValidator(coerce_object)] = Field(
        default_factory=FinancialBreakdown
    )
    recommendations: Annotated[List[Recommendation], BeforeValidator(object_list("recommendation"))] = Field(
        default_factory=list
    )
    next_steps: Annotated[List[NextStep], BeforeValidator(object_list("step"))] = Field(default_factory=list)
    document_analysis: Annotated[DocumentAnalysis, BeforeValidator(coerce_object)] = Field(
        default_factory=DocumentAnalysis
    )
    document_details: Annotated[DocumentDetails, BeforeValidator(coerce_object)] = Field(
        default_factory=DocumentDetails
    )


class ProcessingMetrics(WireModel):
    tokens_used: int = Field(0, ge=0)
    processing_time_ms: int = Field(0, ge=0)
    degradation_tier: DegradationTier = DegradationTier.NONE


class AnalysisOutcome(WireModel):
    """What callers get back: always both a result and its metrics."""

    result: AnalysisResult
    metrics: ProcessingMetrics
