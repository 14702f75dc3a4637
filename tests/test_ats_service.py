from datetime import datetime, timedelta

import pytest

import ats_service
from ats_service import NotFoundError, ValidationError
from database import db
from models import CandidateStatus, JobStatus, EmploymentType


def add_candidate(**overrides):
    data = {'first_name': 'Ken', 'last_name': 'Thompson', 'email': 'ken@example.com', 'position': 'Systems Engineer'}
    data.update(overrides)
    return ats_service.create_candidate(data)


def test_candidate_crud(app_ctx):
    candidate = add_candidate(skills='C, Unix')

    assert candidate.status == CandidateStatus.ACTIVE
    assert candidate.skills == ['C', 'Unix']
    assert ats_service.get_candidates()[0].id == candidate.id

    ats_service.update_candidate(candidate.id, {'rating': 4.5, 'status': 'placed'})
    assert ats_service.get_candidate(candidate.id).status == CandidateStatus.PLACED

    ats_service.delete_candidate(candidate.id)
    with pytest.raises(NotFoundError):
        ats_service.get_candidate(candidate.id)


def test_status_change_keeps_notes(app_ctx):
    candidate = add_candidate()

    updated = ats_service.update_candidate_status(candidate.id, 'inactive', notes='Accepted another offer')

    assert updated.status == CandidateStatus.INACTIVE
    assert updated.ai_analysis['notes'] == 'Accepted another offer'
    assert 'updated_at' in updated.ai_analysis


def test_invalid_status_is_rejected(app_ctx):
    candidate = add_candidate()

    with pytest.raises(ValidationError, match='Allowed: active, inactive, placed'):
        ats_service.update_candidate_status(candidate.id, 'archived')


def test_job_lifecycle(app_ctx):
    job = ats_service.create_job({
        'title': 'Systems Engineer',
        'description': 'Kernel work',
        'requirements': 'C\n\nAssembly\n',
        'employment_type': 'full-time',
        'deadline': '2026-12-31T00:00:00Z',
    })

    assert job.requirements == ['C', 'Assembly']
    assert job.employment_type == EmploymentType.FULL_TIME
    assert job.status == JobStatus.ACTIVE

    assert ats_service.toggle_job_status(job.id).status == JobStatus.PAUSED
    assert ats_service.toggle_job_status(job.id).status == JobStatus.ACTIVE

    ats_service.update_job(job.id, {'status': 'closed'})
    assert ats_service.get_jobs('active') == []
    assert [j.id for j in ats_service.get_jobs('closed')] == [job.id]


def test_candidates_by_job_match_title(app_ctx):
    job = ats_service.create_job({'title': 'Systems Engineer', 'description': 'Kernel work'})
    match = add_candidate()
    add_candidate(email='other@example.com', position='Designer')

    assert [c.id for c in ats_service.get_candidates_by_job(job.id)] == [match.id]

    with pytest.raises(NotFoundError):
        ats_service.get_candidates_by_job('missing')


def test_dashboard_stats(app_ctx):
    add_candidate(email='a@example.com', rating=4.8)
    add_candidate(email='b@example.com', rating=4.0)
    add_candidate(email='c@example.com', rating=3.2, position='Designer')
    old = add_candidate(email='d@example.com', rating=1, status='placed')
    old.created_at = datetime.utcnow() - timedelta(days=30)
    db.session.commit()
    ats_service.create_job({'title': 'Designer', 'description': 'UI', 'status': 'draft'})
    ats_service.create_job({'title': 'Systems Engineer', 'description': 'Kernel'})

    stats = ats_service.get_dashboard_stats()

    assert stats['total_candidates'] == 4
    assert stats['active_candidates'] == 3
    assert stats['placed_candidates'] == 1
    assert (stats['high_rating'], stats['medium_rating'], stats['low_rating']) == (2, 1, 1)
    assert stats['recent_applications'] == 3
    assert stats['positions'] == {'Systems Engineer': 3, 'Designer': 1}
    assert stats['total_jobs'] == 2
    assert stats['active_jobs'] == 1


@pytest.mark.parametrize('deadline', ['next friday', '31/12/2026', 20261231])
def test_job_deadline_must_be_iso_date(app_ctx, deadline):
    with pytest.raises(ValidationError, match='Invalid deadline'):
        ats_service.create_job({'title': 'Writer', 'description': 'Docs', 'deadline': deadline})


def test_parse_datetime_converts_offsets_to_naive_utc():
    parsed = ats_service.parse_datetime('2026-05-01T12:00:00+02:00', 'deadline')

    assert parsed == datetime(2026, 5, 1, 10, 0)
    assert ats_service.parse_datetime(None, 'deadline') is None
