from .models import POST_UPDATED_TOPIC, ChangeEvent
from .publisher import ChangePublisher, Subscription, get_publisher

__all__ = ["POST_UPDATED_TOPIC", "ChangeEvent", "ChangePublisher", "Subscription", "get_publisher"]
