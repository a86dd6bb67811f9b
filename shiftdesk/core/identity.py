"""
Caller identity passed into services where authorization changes behaviour
"""
from dataclasses import dataclass
from typing import Union

from shiftdesk.models.employee import Employee


@dataclass(frozen=True)
class AdminCaller:
    employee_id: int  # the admin's own record, used for approver/marker references


@dataclass(frozen=True)
class EmployeeCaller:
    employee_id: int


Caller = Union[AdminCaller, EmployeeCaller]


def caller_for(employee: Employee) -> Caller:
    if employee.is_admin:
        return AdminCaller(employee_id=employee.id)
    return EmployeeCaller(employee_id=employee.id)


def is_admin(caller: Caller) -> bool:
    return isinstance(caller, AdminCaller)


def can_access_employee(caller: Caller, employee_id: int) -> bool:
    """Admins see everyone; employees only themselves."""
    return is_admin(caller) or caller.employee_id == employee_id
