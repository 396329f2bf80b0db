# models/expense.py
from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, ForeignKey, func
from .base import Base


class Expense(Base):
     """
     Expense model - money spent on a property (maintenance, utilities, taxes...).
     """
     __tablename__ = "expenses"

     id = Column(Integer, primary_key=True, autoincrement=True)
     title = Column(String(255), nullable=False)
     amount = Column(Numeric(12, 2), nullable=False)
     category = Column(String(100), nullable=False)
     user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=True)
     date = Column(DateTime, server_default=func.now(), nullable=False, index=True)
     description = Column(Text, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Expense(id={self.id}, title='{self.title}', amount={self.amount})>"
