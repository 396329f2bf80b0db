# routers/expenses.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user
from models import Expense, Property, User
from schemas.base import MessageResponse
from schemas.expense import ExpenseCreate, ExpenseResponse
from services.activity_service import log_activity

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseResponse])
def get_expenses(db: Session = Depends(get_session), user: User = Depends(get_current_user)):
     return db.query(Expense).order_by(desc(Expense.date), desc(Expense.id)).all()


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
     body: ExpenseCreate,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     if body.property_id is not None and db.get(Property, body.property_id) is None:
          raise HTTPException(400, f"Property with ID {body.property_id} not found")
     data = body.model_dump()
     data["date"] = data["date"] or datetime.now()
     expense = Expense(**data, user_id=user.id)
     db.add(expense)
     db.commit()
     db.refresh(expense)
     log_activity(db, user, "Add Expense", f"Recorded expense '{expense.title}' of {expense.amount}", "expense")
     return expense


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(
     expense_id: int,
     db: Session = Depends(get_session),
     user: User = Depends(get_current_user),
):
     expense = db.get(Expense, expense_id)
     if not expense:
          raise HTTPException(404, "Expense not found")
     db.delete(expense)
     db.commit()
     return {"message": "Expense deleted"}
