"""Database models for the role taxonomy: role kits and job targets."""

import json
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class JsonFieldsMixin:
    """JSON lists/objects are stored as Text columns."""

    def _parse_json(self, field_name, default=list):
        """Parse a JSON text field.  Malformed or empty text yields ``default()``."""
        val = getattr(self, field_name, None)
        try:
            return json.loads(val) if val else default()
        except (json.JSONDecodeError, TypeError):
            return default()

    def _set_json(self, field_name, value):
        """Serialize a list/dict to JSON text (None stays NULL)."""
        setattr(self, field_name, json.dumps(value) if value is not None else None)


class RoleKit(JsonFieldsMixin, Base):
    """Canonical taxonomy entry: one domain × seniority × specialization bundle.

    ``name`` is unique in practice only; the resolver/generator keep it that
    way, there is no constraint.
    """
    __tablename__ = 'role_kits'

    id = Column(Integer, primary_key=True)
    name = Column(String(300), nullable=False, index=True)
    level = Column(String(20), nullable=False, default='mid')         # entry / mid / senior
    domain = Column(String(50), nullable=False, default='general', index=True)
    role_category = Column(String(100))
    description = Column(Text)
    skills_focus = Column(Text)                                        # JSON list or NULL
    default_interview_types = Column(Text, default='[]')               # JSON list
    track_tags = Column(Text, default='[]')                            # JSON list
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<RoleKit {self.id} {self.name!r} {self.domain}/{self.level}>'

    @property
    def skills(self):
        return self._parse_json('skills_focus')

    @property
    def interview_types(self):
        return self._parse_json('default_interview_types')

    @property
    def tags(self):
        return self._parse_json('track_tags')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'level': self.level,
            'domain': self.domain,
            'role_category': self.role_category,
            'description': self.description,
            'skills_focus': self._parse_json('skills_focus', default=lambda: None),
            'default_interview_types': self.interview_types,
            'track_tags': self.tags,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class JobTarget(JsonFieldsMixin, Base):
    """A concrete job posting a candidate is practising for."""
    __tablename__ = 'job_targets'

    id = Column(Integer, primary_key=True)
    role_title = Column(String(500), nullable=False)
    jd_text = Column(Text)
    jd_parsed = Column(Text)                                           # JSON object or NULL
    company_name = Column(String(300))
    role_kit_id = Column(Integer, ForeignKey('role_kits.id'), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f'<JobTarget {self.id} {self.role_title[:30]!r} kit={self.role_kit_id}>'

    @property
    def parsed_jd(self):
        return self._parse_json('jd_parsed', default=dict)

    def to_dict(self):
        return {
            'id': self.id,
            'role_title': self.role_title,
            'jd_text': self.jd_text,
            'jd_parsed': self.parsed_jd,
            'company_name': self.company_name,
            'role_kit_id': self.role_kit_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
