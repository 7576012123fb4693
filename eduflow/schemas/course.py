from datetime import datetime
from typing import Any, List, Optional
from pydantic import Field
from eduflow.schemas.common import CamelModel

class CourseBase(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    instructor_name: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    duration_hours: Optional[int] = Field(default=None, ge=0)
    modules: List[Any] = []
    published: bool = True

class CourseCreate(CourseBase):
    pass

class CourseUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    instructor_name: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    duration_hours: Optional[int] = Field(default=None, ge=0)
    modules: Optional[List[Any]] = None
    published: Optional[bool] = None

class CourseOut(CourseBase):
    id: int
    created_at: Optional[datetime] = None
