from sqlalchemy import Column, Integer, Date, Time, DateTime, Boolean, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Slot(Base):
    __tablename__ = "slots"
    __table_args__ = (
        UniqueConstraint("date", "start_time", "end_time", name="uq_slots_date_time"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # False iff a booked appointment references this slot
    is_available = Column(Boolean, nullable=False, default=True, index=True)
    
    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    
    # Relationships
    appointments = relationship("Appointment", back_populates="slot")
    
    def __repr__(self):
        return f"<Slot(id={self.id}, date='{self.date}', start='{self.start_time}', available={self.is_available})>"
