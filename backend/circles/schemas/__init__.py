from circles.schemas.contact import ContactCreate, ContactUpdate, ContactResponse, ContactList
from circles.schemas.conversation import ConversationCreate, ConversationResponse
from circles.schemas.opportunity import OpportunityCreate, OpportunityUpdate, OpportunityResponse

__all__ = [
    "ContactCreate", "ContactUpdate", "ContactResponse", "ContactList",
    "ConversationCreate", "ConversationResponse",
    "OpportunityCreate", "OpportunityUpdate", "OpportunityResponse",
]
