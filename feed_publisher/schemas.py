"""
Request bodies. Fields left out of a body stay unset, which is how the
partial updates tell "not supplied" from an explicit value.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class BroadcastIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    link: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    published: Optional[bool] = True


class ItemIn(BroadcastIn):
    guid: Optional[str] = None
    pub_date: Optional[datetime] = None


class ItemUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    link: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    published: Optional[bool] = None


class SettingsUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    language: Optional[str] = None
    copyright: Optional[str] = None
    managing_editor: Optional[str] = None
    webmaster: Optional[str] = None
    generator: Optional[str] = None
    image_url: Optional[str] = None
    image_title: Optional[str] = None
    image_link: Optional[str] = None
