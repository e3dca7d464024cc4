"""Admin reports. Every endpoint recomputes its rows from the ledger."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ..crud import crud_dashboard
from ..schemas import dashboard as dashboard_schemas
from .dependencies import get_db, require_admin

router = APIRouter(tags=["Dashboard"], dependencies=[Depends(require_admin)])


@router.get("/frequent-clients", response_model=List[dashboard_schemas.FrequentClient])
def frequent_clients(db: Session = Depends(get_db)):
    return crud_dashboard.frequent_clients(db)


@router.get(
    "/uncommitted-clients",
    response_model=List[dashboard_schemas.UncommittedClient],
)
def uncommitted_clients(db: Session = Depends(get_db)):
    return crud_dashboard.uncommitted_clients(db)


@router.get("/accepted-quotes", response_model=dashboard_schemas.AcceptedQuotesReport)
def accepted_quotes(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970, le=9999),
    db: Session = Depends(get_db),
):
    """Accepted quotes created in the given month; defaults to this month."""
    return crud_dashboard.accepted_quotes(db, month=month, year=year)


@router.get(
    "/prospective-clients",
    response_model=List[dashboard_schemas.ProspectiveClient],
)
def prospective_clients(db: Session = Depends(get_db)):
    return crud_dashboard.prospective_clients(db)


@router.get("/largest-job", response_model=List[dashboard_schemas.LargestJob])
def largest_job(db: Session = Depends(get_db)):
    return crud_dashboard.largest_job(db)


@router.get("/overdue-bills", response_model=List[dashboard_schemas.OverdueBill])
def overdue_bills(db: Session = Depends(get_db)):
    return crud_dashboard.overdue_bills(db)


@router.get("/bad-clients", response_model=List[dashboard_schemas.ClientSummary])
def bad_clients(db: Session = Depends(get_db)):
    return crud_dashboard.bad_clients(db)


@router.get("/good-clients", response_model=List[dashboard_schemas.ClientSummary])
def good_clients(db: Session = Depends(get_db)):
    return crud_dashboard.good_clients(db)
