from fastapi import APIRouter, Depends

from landlord import Tenant, get_tenant

router = APIRouter()


@router.get("/")
def current_tenant(tenant: Tenant = Depends(get_tenant)):
    return tenant.to_dict()
