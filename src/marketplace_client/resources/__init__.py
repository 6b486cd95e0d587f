from .auth import AuthResource
from .billing import BillingResource
from .briefs import BriefsResource
from .chats import ChatsResource
from .conversations import ConversationsResource
from .images import ImagesResource
from .notifications import NotificationsResource
from .subscriptions import SubscriptionsResource

__all__ = [
    "AuthResource",
    "BillingResource",
    "BriefsResource",
    "ChatsResource",
    "ConversationsResource",
    "ImagesResource",
    "NotificationsResource",
    "SubscriptionsResource",
]
