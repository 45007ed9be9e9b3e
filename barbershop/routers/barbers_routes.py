# barbershop/routers/barbers_routes.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from barbershop.db import get_session, reading, write_transaction
from barbershop.errors import DuplicateError
from barbershop.models import Barber, Branch
from barbershop.schemas import BarberCreate, BarberPublic, BranchCreate, BranchPublic

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["directory"],
)


@router.get("/branches", response_model=List[BranchPublic])
def list_branches(session: Session = Depends(get_session)):
    with reading("load branches"):
        branches = session.exec(select(Branch).order_by(Branch.name)).all()
    return [BranchPublic.model_validate(b) for b in branches]


@router.post("/branches", response_model=BranchPublic, status_code=201)
def create_branch(
    branch: BranchCreate,
    session: Session = Depends(get_session),
):
    if branch.id and session.get(Branch, branch.id) is not None:
        raise DuplicateError("Branch id already exists")

    db_branch = Branch(**branch.model_dump(exclude_none=True))
    with write_transaction(session, "create branch", conflict=DuplicateError("Branch id already exists")):
        session.add(db_branch)

    session.refresh(db_branch)
    logger.info("Created branch %s (%s)", db_branch.id, db_branch.name)
    return BranchPublic.model_validate(db_branch)


@router.get("/barbers", response_model=List[BarberPublic])
def list_barbers(
    branch_id: Optional[str] = Query(default=None, alias="branchId"),
    session: Session = Depends(get_session),
):
    with reading("load barbers"):
        barbers = session.exec(select(Barber).order_by(Barber.name)).all()

    # branch list is a JSON column, filter in Python
    if branch_id:
        barbers = [b for b in barbers if branch_id in (b.branches or [])]
    return [BarberPublic.model_validate(b) for b in barbers]


@router.post("/barbers", response_model=BarberPublic, status_code=201)
def create_barber(
    barber: BarberCreate,
    session: Session = Depends(get_session),
):
    if barber.id and session.get(Barber, barber.id) is not None:
        raise DuplicateError("Barber id already exists")

    db_barber = Barber(**barber.model_dump(exclude_none=True))
    with write_transaction(session, "create barber", conflict=DuplicateError("Barber id already exists")):
        session.add(db_barber)

    session.refresh(db_barber)
    logger.info("Created barber %s (%s)", db_barber.id, db_barber.name)
    return BarberPublic.model_validate(db_barber)
