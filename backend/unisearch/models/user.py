from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from unisearch.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    username = Column(Text, nullable=False, unique=True)
    email = Column(Text)
    role = Column(Text, nullable=False, default="member")
    status = Column(Text, nullable=False, default="active")
    created_at = Column(Text, nullable=False)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")


class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    display_name = Column(Text)
    headline = Column(Text)
    bio = Column(Text)
    avatar_url = Column(Text)
    location = Column(Text)
    availability_status = Column(Text)

    user = relationship("User", back_populates="profile")
