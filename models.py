from pydantic import AliasChoices, BaseModel, Field
from typing import Optional, Dict, Any, List

class UserData(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    subscriptions: List[str] = []
    variables: Dict[str, str] = {}
    data: Dict[str, Any] = {}

class ChatMessage(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    message: str
    channel: str = "general"
    timestamp: Optional[str] = None

class GatewayResponse(BaseModel):
    success: bool = False
    message: Optional[str] = None
    sessionId: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("sessionId", "sessionid")
    )
    user: Optional[UserData] = None
    users: Optional[List[UserData]] = None
    messages: Optional[List[ChatMessage]] = None
    data: Optional[Any] = None
    contents: Optional[str] = None

class WebhookEvent(BaseModel):
    id: Optional[str] = None
    event: str
    timestamp: Optional[str] = None
    data: Dict[str, Any] = {}

class WebhookAckResponse(BaseModel):
    received: bool
    event: str

class HealthCheckResponse(BaseModel):
    status: str
    service: str
    version: str
    hardwareId: Optional[str] = None
