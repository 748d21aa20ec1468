from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    # One profile per user; the unique index is also the upsert conflict target.
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    company = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    status = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    githubusername = Column(String(100), nullable=True)
    skills = Column(JSON, nullable=True)  # ordered list of strings
    social = Column(JSON, nullable=True)  # {"twitter": url, ...}; NULL when none supplied
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")
    # Newest first: entries are "prepended" by insertion order.
    experience = relationship(
        "Experience",
        back_populates="profile",
        order_by="Experience.id.desc()",
        cascade="all, delete-orphan",
    )
    education = relationship(
        "Education",
        back_populates="profile",
        order_by="Education.id.desc()",
        cascade="all, delete-orphan",
    )


class Experience(Base):
    __tablename__ = "experiences"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=True)
    current = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)

    profile = relationship("Profile", back_populates="experience")


class Education(Base):
    __tablename__ = "educations"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    school = Column(String(255), nullable=False)
    degree = Column(String(255), nullable=False)
    fieldofstudy = Column(String(255), nullable=False)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=True)
    current = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)

    profile = relationship("Profile", back_populates="education")
