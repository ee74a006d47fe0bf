# riskboard/api/v1/employees.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status, Response
from sqlalchemy.orm import Session

from riskboard.api.deps import get_now
from riskboard.core.rules import RuleProfile, get_rules
from riskboard.db.session import get_db
from riskboard.models.employee import Employee
from riskboard.schemas.common import ValidityOut
from riskboard.schemas.employee import (
    EmployeeComplianceOut,
    EmployeeCreate,
    EmployeeImportRow,
    EmployeeOut,
    EmployeeUpdate,
)
from riskboard.crud.employee import (
    get_employee as crud_get_employee,
    list_employees as crud_list_employees,
    create_employee as crud_create_employee,
    create_employees as crud_create_employees,
    update_employee as crud_update_employee,
    delete_employee as crud_delete_employee,
)
from riskboard.crud.location import get_location as crud_get_location
from riskboard.services.compliance import check_validity
from riskboard.services.ingest import build_employee_payload

router = APIRouter()


def _compliance_out(e: Employee, now: datetime, rules: RuleProfile) -> EmployeeComplianceOut:
    training = check_validity(e.last_training_date, e.hazard_class, "training", now, rules)
    health = check_validity(e.last_health_check_date, e.hazard_class, "health", now, rules)
    return EmployeeComplianceOut(
        employee_id=e.id,
        name=e.name,
        hazard_class=e.hazard_class,
        training=ValidityOut.model_validate(training),
        health=ValidityOut.model_validate(health),
    )


def _get_or_404(db: Session, employee_id: int) -> Employee:
    obj = crud_get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Employee not found")
    return obj


def _check_location(db: Session, location_id: Optional[int]) -> None:
    if location_id is not None and not crud_get_location(db, location_id):
        raise HTTPException(status_code=404, detail="Location not found")


@router.get("/employees", response_model=List[EmployeeOut])
def list_employees(
    location_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return [EmployeeOut.model_validate(e) for e in crud_list_employees(db, location_id)]


# declared before /employees/{employee_id} so "compliance" is not read as an id
@router.get("/employees/compliance", response_model=List[EmployeeComplianceOut])
def list_compliance(
    location_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """Training and health-check validity for every employee (optionally one location)."""
    return [_compliance_out(e, now, rules) for e in crud_list_employees(db, location_id)]


@router.post("/employees", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    _check_location(db, payload.location_id)
    return EmployeeOut.model_validate(crud_create_employee(db, payload))


@router.post(
    "/locations/{location_id}/employees/import",
    response_model=List[EmployeeOut],
    status_code=status.HTTP_201_CREATED,
)
def import_employees(
    location_id: int,
    rows: List[EmployeeImportRow],
    db: Session = Depends(get_db),
):
    """
    Bulk roster import. Rows carry name, job_title, hazard_class and the two
    dates in any of the spreadsheet formats; rows without a name are skipped.
    """
    _check_location(db, location_id)
    payloads = [build_employee_payload(r.model_dump(), location_id) for r in rows if r.name]
    return [EmployeeOut.model_validate(e) for e in crud_create_employees(db, payloads)]


@router.get("/employees/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    return EmployeeOut.model_validate(_get_or_404(db, employee_id))


@router.get("/employees/{employee_id}/compliance", response_model=EmployeeComplianceOut)
def get_employee_compliance(
    employee_id: int,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    return _compliance_out(_get_or_404(db, employee_id), now, rules)


@router.patch("/employees/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
):
    obj = _get_or_404(db, employee_id)
    _check_location(db, payload.location_id)
    return EmployeeOut.model_validate(crud_update_employee(db, obj, payload))


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(employee_id: int, db: Session = Depends(get_db)) -> Response:
    crud_delete_employee(db, _get_or_404(db, employee_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
