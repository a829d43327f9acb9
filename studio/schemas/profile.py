from pydantic import BaseModel
from typing import Optional

class StudioProfileUpdate(BaseModel):
    name: Optional[str] = None
    ownerName: Optional[str] = None
    whatsapp: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    history: Optional[str] = None
    mission: Optional[str] = None
    image: Optional[str] = None

class StudioProfile(BaseModel):
    id: str
    name: str
    ownerName: Optional[str] = None
    whatsapp: str = "+55"
    address: str = ""
    email: str = ""
    history: Optional[str] = None
    mission: Optional[str] = None
    image: Optional[str] = None
