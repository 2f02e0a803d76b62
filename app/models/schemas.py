from pydantic import BaseModel, Field
from typing import List, Optional


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    response: str


class ReportAnalysis(BaseModel):
    shape: List[int]
    result: List[float]


class ReportAnalysisResponse(BaseModel):
    message: str
    analysis: ReportAnalysis


class ProfileResponse(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None
    emergency_contact: Optional[str] = None
    profile_img: Optional[str] = None
    role: Optional[str] = None
