# api/routes/templates.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.images import get_template_list
from core.sa.models import User, ListType
from api.dependencies import get_current_user

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("")
def get_templates(
    list_type: Optional[ListType] = Query(None, alias="listType", description="Only templates for this list type"),
    user: User = Depends(get_current_user),
):
    """Return share image templates, sorted by name."""
    return {"templates": get_template_list(list_type.value if list_type else None)}
