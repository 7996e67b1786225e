# stockmeta/api/v1/endpoints/categories.py
from typing import List

from fastapi import APIRouter

from stockmeta.ml.categories import CATEGORIES
from stockmeta.schemas.metadata import CategoryOut

router = APIRouter()


@router.get("/", response_model=List[CategoryOut], summary="Adobe Stock category list")
async def list_categories():
    return [CategoryOut(id=code, name=name) for code, name in CATEGORIES.items()]
