from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship
from unisearch.database import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    website = Column(Text)
    description = Column(Text)
    logo_url = Column(Text)
    industry = Column(Text)
    company_size = Column(Text)
    location = Column(Text)
    verified_company = Column(Integer, nullable=False, default=0)
    follower_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    jobs = relationship("Job", back_populates="company", cascade="all, delete-orphan")
