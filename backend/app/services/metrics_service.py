from collections import defaultdict
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.enums import DefectField, options_for, vocabulary_for
from app.models.defect import Defect


def _filtered(query, project_id: Optional[UUID]):
    if project_id is not None:
        query = query.filter(Defect.project_id == project_id)
    return query


# ==========================================
# SUMMARY METRICS
# ==========================================

def _count_by(db: Session, column, field: DefectField, project_id: Optional[UUID]):
    rows = (
        _filtered(db.query(column, func.count(Defect.id)), project_id)
        .group_by(column)
        .all()
    )
    found = dict(rows)

    # Every token appears, even with no defects
    return {token: found.get(token, 0) for token in vocabulary_for(field)}


def generate_summary_metrics(db: Session, project_id: Optional[UUID] = None):

    total_defects = (
        _filtered(db.query(func.count(Defect.id)), project_id)
        .scalar()
    )

    return {
        "total": total_defects or 0,
        "by_status": _count_by(db, Defect.status, DefectField.STATUS, project_id),
        "by_severity": _count_by(db, Defect.severity, DefectField.SEVERITY, project_id),
        "by_priority": _count_by(db, Defect.priority, DefectField.PRIORITY, project_id),
        "by_type": _count_by(db, Defect.type, DefectField.TYPE, project_id),
    }


# ==========================================
# DEFECTS OVER TIME
# ==========================================

def generate_defects_over_time(db: Session, project_id: Optional[UUID] = None):

    defects = (
        _filtered(db.query(Defect.created_at, Defect.type), project_id)
        .order_by(Defect.created_at)
        .all()
    )

    type_tokens = vocabulary_for(DefectField.TYPE)
    per_day = defaultdict(lambda: dict.fromkeys(type_tokens, 0))

    for created_at, defect_type in defects:
        day = created_at.date().isoformat()
        counts = per_day[day]
        if defect_type in counts:
            counts[defect_type] += 1

    return {
        "types": [option._asdict() for option in options_for(DefectField.TYPE)],
        "data": [
            {"date": day, **per_day[day]}
            for day in sorted(per_day)
        ],
    }
