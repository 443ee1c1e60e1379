from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Webhook relay

class WebhookAck(BaseModel):
    success: bool = True
    message: str
    customer_name: str
    customer_id: Optional[Any] = None
    email: Optional[str] = None
    subscriptions_count: int
    timestamp: str

class GenericWebhookAck(BaseModel):
    success: bool = True
    message: str
    webhookId: str
    timestamp: str
    method: str
    dataReceived: Any = None

class WebhookEntryOut(BaseModel):
    id: str
    webhookId: str
    timestamp: str
    method: str
    data: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
    ip: str

class WebhookDataResp(BaseModel):
    success: bool = True
    data: List[WebhookEntryOut] = Field(default_factory=list)
    count: int

# Address form

class FormSubscriptionOut(BaseModel):
    id: str
    name: str
    address: str

class EditableAddressOut(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""

class SuggestionListOut(BaseModel):
    items: List[str] = Field(default_factory=list)
    visible: bool = False

class FormStateResp(BaseModel):
    loaded: bool
    customer_name: str = ""
    subscriptions: List[FormSubscriptionOut] = Field(default_factory=list)
    selected: List[str] = Field(default_factory=list)
    addresses: Dict[str, EditableAddressOut] = Field(default_factory=dict)
    suggestions: Dict[str, SuggestionListOut] = Field(default_factory=dict)

class FormSelectReq(BaseModel):
    subscription_id: str
    selected: bool = True

class FormFieldReq(BaseModel):
    field: str
    value: str = ""

class FormSuggestionReq(BaseModel):
    suggestion: str

class OutboundAddressOut(BaseModel):
    address1: str
    city: str
    province: str
    zip: str
    country_code: str = "US"

class UpdateRecordOut(BaseModel):
    subscription_id: str
    subscription_name: str
    old_address: OutboundAddressOut
    new_address: OutboundAddressOut

class SubmitResp(BaseModel):
    status: str
    message: str
    records: List[UpdateRecordOut] = Field(default_factory=list)
