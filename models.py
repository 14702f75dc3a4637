import enum
import uuid
from datetime import datetime
from database import db
from flask_login import UserMixin
from sqlalchemy import Enum


def _uuid():
    return str(uuid.uuid4())


def _values(enum_cls):
    # Store enum values ("full-time") rather than member names ("FULL_TIME")
    return [member.value for member in enum_cls]


def _iso(value):
    return value.isoformat() if value else None


class UserRole(enum.Enum):
    ADMIN = "admin"
    RECRUITER = "recruiter"


class CandidateStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PLACED = "placed"


class JobStatus(enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class EmploymentType(enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    FREELANCE = "freelance"
    REMOTE = "remote"


class RecruitmentStatus(enum.Enum):
    INVITED = "invited"
    APPLIED = "applied"
    AI_ANALYZED = "ai_analyzed"
    SCREENING = "screening"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    HIRED = "hired"
    REJECTED = "rejected"


class ApplicationStatus(enum.Enum):
    """Pipeline stages of applications held by the workflow engine's ATS."""
    APPLIED = "applied"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


class TemplateType(enum.Enum):
    INVITATION = "invitation"
    REMINDER = "reminder"
    REJECTION = "rejection"
    INTERVIEW_SCHEDULED = "interview_scheduled"


class BatchStatus(enum.Enum):
    PENDING = "pending"
    SENDING = "sending"
    COMPLETED = "completed"
    FAILED = "failed"


class InterviewType(enum.Enum):
    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in-person"
    TECHNICAL = "technical"


class InterviewStatus(enum.Enum):
    SCHEDULED = "scheduled"
    SENT = "sent"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PENDING_CANDIDATE_SELECTION = "pending_candidate_selection"


class SchedulingMode(enum.Enum):
    MANUAL = "manual"
    SELF_SCHEDULE = "self_schedule"


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(Enum(UserRole, values_callable=_values), default=UserRole.RECRUITER)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role.value if self.role else None,
            'is_admin': self.is_admin,
            'created_at': _iso(self.created_at),
        }


class Candidate(db.Model):
    __tablename__ = 'candidates'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False, default='')
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(32))
    position = db.Column(db.String(200), nullable=False)
    experience = db.Column(db.Text)
    skills = db.Column(db.JSON)  # list of strings
    cover_letter = db.Column(db.Text)
    resume_url = db.Column(db.String(512))
    status = db.Column(Enum(CandidateStatus, values_callable=_values), default=CandidateStatus.ACTIVE)
    rating = db.Column(db.Float)
    match_score = db.Column(db.Integer)  # 0-100, set by AI screening
    ai_analysis = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'position': self.position,
            'experience': self.experience,
            'skills': self.skills or [],
            'cover_letter': self.cover_letter,
            'resume_url': self.resume_url,
            'status': self.status.value if self.status else None,
            'rating': self.rating,
            'match_score': self.match_score,
            'ai_analysis': self.ai_analysis,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Job(db.Model):
    __tablename__ = 'jobs'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    title = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200))
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.JSON)  # list of requirement lines
    location = db.Column(db.String(100))
    salary_range = db.Column(db.String(100))
    department = db.Column(db.String(100))
    employment_type = db.Column(Enum(EmploymentType, values_callable=_values), default=EmploymentType.FULL_TIME)
    status = db.Column(Enum(JobStatus, values_callable=_values), default=JobStatus.ACTIVE)
    applicants_count = db.Column(db.Integer, default=0)
    deadline = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'company': self.company,
            'description': self.description,
            'requirements': self.requirements or [],
            'location': self.location,
            'salary_range': self.salary_range,
            'department': self.department,
            'employment_type': self.employment_type.value if self.employment_type else None,
            'status': self.status.value if self.status else None,
            'applicants_count': self.applicants_count or 0,
            'deadline': _iso(self.deadline),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class RecruitmentCandidate(db.Model):
    """Candidate invited by a recruiter who applies through a token link."""
    __tablename__ = 'recruitment_candidates'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    token = db.Column(db.String(64), unique=True, nullable=False, default=_uuid, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False, default='')
    email = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(32))
    position = db.Column(db.String(200), nullable=False)
    experience = db.Column(db.Text)
    skills = db.Column(db.JSON)
    resume_url = db.Column(db.String(512))
    status = db.Column(Enum(RecruitmentStatus, values_callable=_values),
                       default=RecruitmentStatus.INVITED, index=True)
    match_score = db.Column(db.Integer)
    ai_analysis = db.Column(db.JSON)
    screening_questions = db.Column(db.JSON)
    interview_scheduled_at = db.Column(db.DateTime)

    # Invitation tracking
    invited_by = db.Column(db.String(120))
    invited_at = db.Column(db.DateTime, default=datetime.utcnow)
    applied_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        return {
            'id': self.id,
            'token': self.token,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'position': self.position,
            'experience': self.experience,
            'skills': self.skills or [],
            'resume_url': self.resume_url,
            'status': self.status.value if self.status else None,
            'match_score': self.match_score,
            'ai_analysis': self.ai_analysis,
            'screening_questions': self.screening_questions or [],
            'interview_scheduled_at': _iso(self.interview_scheduled_at),
            'invited_by': self.invited_by,
            'invited_at': _iso(self.invited_at),
            'applied_at': _iso(self.applied_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class EmailTemplate(db.Model):
    __tablename__ = 'email_templates'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(200), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    body = db.Column(db.Text, nullable=False)
    type = db.Column(Enum(TemplateType, values_callable=_values), default=TemplateType.INVITATION)
    is_default = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'subject': self.subject,
            'body': self.body,
            'type': self.type.value if self.type else None,
            'is_default': bool(self.is_default),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class EmailBatch(db.Model):
    __tablename__ = 'email_batches'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    template_id = db.Column(db.String(36), db.ForeignKey('email_templates.id'))
    candidate_ids = db.Column(db.JSON)
    sent_count = db.Column(db.Integer, default=0)
    failed_count = db.Column(db.Integer, default=0)
    status = db.Column(Enum(BatchStatus, values_callable=_values), default=BatchStatus.PENDING)
    created_by = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime)

    def to_dict(self):
        return {
            'id': self.id,
            'template_id': self.template_id,
            'candidate_ids': self.candidate_ids or [],
            'sent_count': self.sent_count or 0,
            'failed_count': self.failed_count or 0,
            'status': self.status.value if self.status else None,
            'created_by': self.created_by,
            'created_at': _iso(self.created_at),
            'completed_at': _iso(self.completed_at),
        }


class InterviewSchedule(db.Model):
    """Local record of every interview handed to the workflow engine.

    ``synced`` is False when the engine could not be reached and the
    interview only exists here.
    """
    __tablename__ = 'interview_schedules'

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    application_id = db.Column(db.String(64))
    candidate_id = db.Column(db.String(64))
    job_id = db.Column(db.String(64))
    candidate_name = db.Column(db.String(200))
    candidate_email = db.Column(db.String(120))
    job_title = db.Column(db.String(200))
    interviewer_email = db.Column(db.String(120))
    scheduled_date = db.Column(db.DateTime)
    interview_type = db.Column(Enum(InterviewType, values_callable=_values), default=InterviewType.VIDEO)
    status = db.Column(Enum(InterviewStatus, values_callable=_values), default=InterviewStatus.SCHEDULED)
    scheduling_mode = db.Column(Enum(SchedulingMode, values_callable=_values), default=SchedulingMode.MANUAL)
    scheduling_link = db.Column(db.String(512))
    questions = db.Column(db.JSON)
    exercise = db.Column(db.JSON)
    synced = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'application_id': self.application_id,
            'candidate_id': self.candidate_id,
            'job_id': self.job_id,
            'candidate_name': self.candidate_name,
            'candidate_email': self.candidate_email,
            'job_title': self.job_title,
            'interviewer_email': self.interviewer_email,
            'scheduled_date': _iso(self.scheduled_date),
            'interview_type': self.interview_type.value if self.interview_type else None,
            'status': self.status.value if self.status else None,
            'scheduling_mode': self.scheduling_mode.value if self.scheduling_mode else None,
            'scheduling_link': self.scheduling_link,
            'questions': self.questions or [],
            'exercise': self.exercise,
            'synced': bool(self.synced),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
