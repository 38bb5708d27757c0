from typing import List

from fastapi import APIRouter

from prism.core import schemas
from prism.core.catalog import ORGANIZATIONS, PRIVACY_POLICIES

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/organizations", response_model=List[schemas.OrganizationResponse])
async def get_organizations():
    return list(ORGANIZATIONS)


@router.get("/policies", response_model=List[schemas.PrivacyPolicyResponse])
async def get_privacy_policies():
    return list(PRIVACY_POLICIES)
