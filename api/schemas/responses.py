"""Response schemas for the API."""

from typing import Optional

from pydantic import BaseModel


class EventOut(BaseModel):
    """A scenario event as returned by the API."""
    id: str
    country: str
    worker_type: str
    event_type: str
    job_function: str
    quantity: int
    timing_quarter: str
    avg_annual_salary_usd: float
    destination_country: Optional[str] = None


class SignalsOut(BaseModel):
    """Flattened display signals."""
    total_cost_impact: int
    headcount_delta: int
    risk_cluster_count: int
    visa_load: int
    ofs: int
    gli: int
    pcr: str  # Low|Medium|High
    liability_tail: int
    exposure_score: int
    governance_load: int
    execution_cluster_risk: int
    input_completeness_score: int


class HeatmapCellOut(BaseModel):
    country: str
    event_type: str
    risk_score: int
    label: str


class ThresholdBreachOut(BaseModel):
    threshold_id: str
    label: str
    current: int
    threshold: int
    breached: bool
    country: Optional[str] = None
    description: str


class PolicyTriggerOut(BaseModel):
    policy_id: str
    title: str
    family: str
    severity: str  # LOW|MEDIUM|HIGH|CRITICAL
    confidence: float
    evidence_ids: list[str]
    evidence_text: str
    description: str
    country: Optional[str] = None


class WorkflowStepOut(BaseModel):
    step_id: str
    title: str
    owner: str
    days_required: int
    dependencies: list[str]
    systems_touched: list[str]
    event_type: str


class EvidenceOut(BaseModel):
    id: str
    source: str
    text: str
    policy_id: Optional[str] = None


class ComponentScoresOut(BaseModel):
    exposure_score: int
    governance_load: int
    execution_cluster_risk: int
    input_completeness_score: int
    confidence_penalty: int


class WeightsOut(BaseModel):
    exposure: float
    governance: float
    speed: float
    confidence: float


class EvaluationOut(BaseModel):
    """A complete scenario evaluation."""
    id: str
    created_at: str
    summary: str
    signals: SignalsOut
    heatmap: list[HeatmapCellOut]
    threshold_breaches: list[ThresholdBreachOut]
    triggers: list[PolicyTriggerOut]
    workflow: list[WorkflowStepOut]
    evidence: list[EvidenceOut]
    data_gaps: list[str]
    staging_suggestion: str
    component_scores: ComponentScoresOut
    weights: WeightsOut


class EvaluateResponse(BaseModel):
    """Response from scenario evaluation."""
    evaluation: EvaluationOut
    fingerprint: str
    scenario_hash: str
    reference_pack_id: str
    reference_pack_version: str
    engine_version: str


class RecomputeResponse(BaseModel):
    """Composite score for the given components and weights."""
    ofs: int
    contributions: dict[str, float]
    weights: WeightsOut


class NormalizeResponse(BaseModel):
    """Rebalanced weights."""
    weights: WeightsOut
    total: float


class SequencedEventsResponse(BaseModel):
    """Events after the recommended re-sequencing."""
    events: list[EventOut]
    original_count: int
    sequenced_count: int
    total_quantity: int


class ProjectionOut(BaseModel):
    components: ComponentScoresOut
    breaches_before: int
    breaches_after: int
    breaches_removed: int
    ofs: int


class SequencingPreviewResponse(BaseModel):
    """Baseline evaluation and its sequencing projection."""
    baseline: EvaluationOut
    projection: ProjectionOut
    sequenced: EvaluationOut


class ComparisonDeltas(BaseModel):
    ofs: int
    breached: int
    total_cost_impact: int


class SequencingCompareResponse(BaseModel):
    """Baseline vs. full re-evaluation of the sequenced events."""
    baseline: EvaluationOut
    sequenced_events: list[EventOut]
    sequenced: EvaluationOut
    deltas: ComparisonDeltas


class TopRiskOut(BaseModel):
    severity: str
    title: str
    evidence_ids: list[str]


class BriefResponse(BaseModel):
    """Deterministic executive brief."""
    scenario_summary: str
    of_score: int
    dominant_driver: str  # Exposure|Governance|Execution|Confidence
    tradeoff_identified: str
    recommended_sequencing: list[str]
    input_confidence: int
    data_required: list[str]
    exec_brief: str
    top_risks: list[TopRiskOut]
    staging_plan: list[str]
    exec_sentence: str
    evaluation_id: str


class PresetSummary(BaseModel):
    number: int
    name: str


class PresetDetail(BaseModel):
    number: int
    name: str
    events: list[EventOut]


class PolicySummary(BaseModel):
    """Policy rule as listed in the reference catalog."""
    id: str
    title: str
    family: str
    severity: str
    confidence: float
    countries: list[str]
    event_types: list[str]
    evidence_ids: list[str]
    threshold_key: Optional[str] = None
    description: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    engine_version: str
    reference_pack_loaded: bool
    timestamp: str


class VersionResponse(BaseModel):
    """Version information response."""
    engine_version: str
    api_version: str
    reference_pack_id: str
    reference_pack_version: str
    reference_pack_hash: str
    schema_version: str


class ErrorResponse(BaseModel):
    """Domain error body."""
    code: str
    message: str
    details: Optional[dict] = None
    scenario_id: Optional[str] = None
