# subslayer/models/user.py
# Note: User is defined in core/auth.py next to the fastapi-users wiring, so
# we do not redefine it here. Importing this package registers every table.

from subslayer.core.auth import User
from subslayer.models.subscription import Subscription
from subslayer.models.profile import Profile
from subslayer.models.notification import Notification

__all__ = ["User", "Subscription", "Profile", "Notification"]
