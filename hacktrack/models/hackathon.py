"""ORM model for tracked hackathon events."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from hacktrack.models.base import Base


class Hackathon(Base):
    """
    One tracked hackathon. Every descriptive field is optional; the app does not
    validate event content, it only stamps who created and last modified it.
    """

    __tablename__ = "hackathons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=True)
    organizer = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    mode = Column(Text, nullable=True)  # Online / Offline / Hybrid
    ppt_needed = Column(Text, nullable=True)  # Yes / No
    registered = Column(Text, nullable=True)  # Yes / No
    start_date = Column(Text, nullable=True)
    end_date = Column(Text, nullable=True)
    team_size = Column(Integer, nullable=True)
    team_code = Column(Text, nullable=True)
    link = Column(Text, nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    modified_by = Column(String(255), nullable=True)
    modified_at = Column(DateTime(timezone=True), nullable=True)
