from circles.models.user import User
from circles.models.contact import Contact, RelationshipLayer, ContactFrequency
from circles.models.conversation import Conversation, ConversationType
from circles.models.opportunity import Opportunity, OpportunityType, Priority

__all__ = [
    "User",
    "Contact", "RelationshipLayer", "ContactFrequency",
    "Conversation", "ConversationType",
    "Opportunity", "OpportunityType", "Priority",
]
