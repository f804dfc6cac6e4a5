from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from unisearch.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Text, primary_key=True)
    company_id = Column(Text, ForeignKey("companies.id", ondelete="CASCADE"))
    title = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
    requirements = Column(Text, nullable=False, default="")
    location = Column(Text)
    job_type = Column(Text)
    work_location = Column(Text)
    experience_level = Column(Text)
    salary_min = Column(Float)
    salary_max = Column(Float)
    salary_currency = Column(Text)
    status = Column(Text, nullable=False, default="draft")
    expires_at = Column(Text)
    published_at = Column(Text)
    view_count = Column(Integer, nullable=False, default=0)
    application_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    company = relationship("Company", back_populates="jobs")
