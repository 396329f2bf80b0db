# models/property.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Property(Base):
     """
     Property model - a building or compound holding rentable units.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     location = Column(String(255), nullable=False)
     type = Column(String(100), default="Apartment", nullable=False)
     caretaker_id = Column(Integer, ForeignKey("users.id"), nullable=True)
     image = Column(String(500), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     caretaker = relationship("User")
     units = relationship("Unit", back_populates="property", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
