"""Reference catalog endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from api.schemas.responses import EvidenceOut, PolicySummary
from workforcepilot.models import ReferenceTables

router = APIRouter(prefix="/reference", tags=["Reference"])

# Shared reference tables (set by main.py)
tables: Optional[ReferenceTables] = None


def set_tables(t: ReferenceTables):
    global tables
    tables = t


def _get_tables() -> ReferenceTables:
    if tables is None:
        raise HTTPException(status_code=503, detail="Reference pack not loaded")
    return tables


@router.get("/policies", response_model=list[PolicySummary])
async def list_policies(country: Optional[str] = None, family: Optional[str] = None):
    """
    List the policy rules in catalog order.

    Optionally filter by country code (ES, DE, GB, US) or policy family.
    """
    rules = list(_get_tables().policy_rules.values())

    if country:
        rules = [r for r in rules if any(c.value == country.upper() for c in r.countries)]
    if family:
        rules = [r for r in rules if r.family.lower() == family.lower()]

    return [
        PolicySummary(
            id=r.id,
            title=r.title,
            family=r.family,
            severity=r.severity.value,
            confidence=r.confidence,
            countries=[c.value for c in r.countries],
            event_types=[e.value for e in r.event_types],
            evidence_ids=list(r.evidence_ids),
            threshold_key=r.threshold_key,
            description=r.description,
        )
        for r in rules
    ]


@router.get("/evidence", response_model=list[EvidenceOut])
async def list_evidence(policy_id: Optional[str] = None):
    """List the evidence catalog, optionally for one policy."""
    entries = _get_tables().evidence
    if policy_id:
        entries = tuple(e for e in entries if e.policy_id == policy_id)
    return [EvidenceOut(**e.to_dict()) for e in entries]
