# riskboard/crud/employee.py
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from riskboard.models.employee import Employee
from riskboard.schemas.employee import EmployeeCreate, EmployeeUpdate


def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.get(Employee, employee_id)


def list_employees(db: Session, location_id: Optional[int] = None) -> List[Employee]:
    q = db.query(Employee)
    if location_id is not None:
        q = q.filter(Employee.location_id == location_id)
    return q.order_by(Employee.name.asc(), Employee.id.asc()).all()


def create_employee(db: Session, payload: EmployeeCreate) -> Employee:
    obj = Employee(**payload.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def create_employees(db: Session, rows: List[Dict[str, Any]]) -> List[Employee]:
    objs = [Employee(**row) for row in rows]
    db.add_all(objs)
    db.commit()
    for o in objs:
        db.refresh(o)
    return objs


def update_employee(db: Session, obj: Employee, payload: EmployeeUpdate) -> Employee:
    data = payload.model_dump(exclude_unset=True)
    for k in ("location_id", "name", "job_title", "hazard_class"):
        if k in data and data[k] is None:
            data.pop(k)
    for k, v in data.items():
        setattr(obj, k, v)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_employee(db: Session, obj: Employee) -> None:
    db.delete(obj)
    db.commit()
