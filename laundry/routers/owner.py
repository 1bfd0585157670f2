"""Owner dashboard API: statistics, customers, staff and the service catalogue.

Every route needs the service ``X-API-KEY``.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..models import AdminUser, Service
from ..providers import get_identity_provider, get_order_store, get_service_catalogue
from ..schemas import (
    CustomerStatsOut,
    DashboardOut,
    RegisterStaffIn,
    ServiceActiveIn,
    ServiceIn,
    ServiceOut,
    StaffOut,
)
from ..services import dashboard
from ..services.store import CONFLICT, NOT_FOUND
from ..utils import format_naira_from_kobo, hash_password, require_service_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/owner", tags=["owner"], dependencies=[Depends(require_service_api_key)])


def _status_for(res) -> int:
    if res.code == NOT_FOUND:
        return 404
    if res.code == CONFLICT:
        return 409
    return 500


@router.get("/dashboard", response_model=DashboardOut)
async def overview(identity=Depends(get_identity_provider), orders=Depends(get_order_store)):
    res = await dashboard.build_overview(identity, orders)
    if not res.success:
        raise HTTPException(status_code=500, detail=res.error)
    data = res.data
    data["total_revenue_display"] = format_naira_from_kobo(data["orders"].total_revenue)
    return data


@router.get("/customers", response_model=List[CustomerStatsOut])
async def customers(identity=Depends(get_identity_provider), orders=Depends(get_order_store)):
    res = await dashboard.load_customers(identity, orders)
    if not res.success:
        raise HTTPException(status_code=500, detail=res.error)
    return res.data


# ---- staff ----

@router.get("/staff", response_model=List[StaffOut])
async def list_staff(identity=Depends(get_identity_provider)):
    res = await dashboard.load_staff(identity)
    if not res.success:
        raise HTTPException(status_code=500, detail=res.error)
    return res.data


@router.post("/staff", response_model=StaffOut, status_code=201)
async def create_staff(payload: RegisterStaffIn, identity=Depends(get_identity_provider)):
    member = AdminUser(
        email=payload.email.lower(),
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        role=payload.role,
        employee_id=payload.employee_id,
        hire_date=payload.hire_date,
        permissions=payload.permissions,
        assigned_areas=payload.assigned_areas,
        working_hours_start=payload.working_hours.start,
        working_hours_end=payload.working_hours.end,
        working_days=payload.working_days,
    )
    res = await identity.register_admin(member)
    if not res.success:
        raise HTTPException(status_code=_status_for(res), detail=res.error or "Failed to create staff member")
    logger.info("staff member created", extra={"member_id": res.data.id, "role": payload.role.value})
    return dashboard.staff_stats(res.data)


@router.delete("/staff/{member_id}", status_code=204)
async def delete_staff(member_id: str, identity=Depends(get_identity_provider)):
    res = await identity.delete_admin_user(member_id)
    if not res.success:
        raise HTTPException(status_code=_status_for(res), detail=res.error)
    logger.info("staff member deleted", extra={"member_id": member_id})


# ---- services ----

@router.get("/services", response_model=List[ServiceOut])
async def list_services(active_only: bool = False, catalogue=Depends(get_service_catalogue)):
    res = await catalogue.get_services(active_only=active_only)
    if not res.success:
        raise HTTPException(status_code=500, detail=res.error)
    return res.data


@router.post("/services", response_model=ServiceOut, status_code=201)
async def create_service(payload: ServiceIn, catalogue=Depends(get_service_catalogue)):
    res = await catalogue.create_service(Service(**payload.to_model_fields()))
    if not res.success:
        raise HTTPException(status_code=500, detail=res.error)
    return res.data


@router.put("/services/{service_id}", response_model=ServiceOut)
async def update_service(service_id: str, payload: ServiceIn, catalogue=Depends(get_service_catalogue)):
    res = await catalogue.update_service(service_id, payload.to_model_fields())
    if not res.success:
        raise HTTPException(status_code=_status_for(res), detail=res.error)
    return res.data


@router.patch("/services/{service_id}/active", response_model=ServiceOut)
async def set_service_active(service_id: str, payload: ServiceActiveIn, catalogue=Depends(get_service_catalogue)):
    res = await catalogue.update_service(service_id, {"is_active": payload.is_active})
    if not res.success:
        raise HTTPException(status_code=_status_for(res), detail=res.error)
    return res.data
