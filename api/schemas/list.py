# api/schemas/list.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import CamelModel
from .library import TitleSummary
from .user import PublicUser


class ListCreate(CamelModel):
    # Loosely typed; the list validators own the error messages
    name: Any = None
    description: Any = None
    type: Any = None
    tiers: Any = None
    image_template_id: Optional[str] = None


class ListUpdate(CamelModel):
    name: Any = None
    description: Any = None
    type: Any = None
    tiers: Any = None
    image_template_id: Optional[str] = None
    regenerate_image: bool = False


class ListItemsUpdate(CamelModel):
    items: Any = None


class ListItem(CamelModel):
    id: str
    title_asin: str
    position: int
    tier: Optional[str] = None
    title: Optional[TitleSummary] = None


class ListSummary(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    type: str
    tiers: List[str] = []
    item_count: int = 0
    image_template_id: Optional[str] = None
    image_status: str
    created_at: datetime
    updated_at: datetime


class ListDetail(ListSummary):
    image_version: int = 0
    image_generated_at: Optional[datetime] = None
    image_error: Optional[str] = None
    image_og_url: Optional[str] = None
    image_square_url: Optional[str] = None
    items: List[ListItem] = []


class ListsResponse(CamelModel):
    lists: List[ListSummary]


class PublicListsResponse(CamelModel):
    user: PublicUser
    lists: List[ListSummary]


class PublicListDetail(ListDetail):
    user: PublicUser
    share_urls: Dict[str, str] = {}


class RegenerateImagesResponse(CamelModel):
    image_version: int
    image_status: str
