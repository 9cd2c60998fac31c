from sqlalchemy.orm import declarative_base

Base = declarative_base()

from .availability import Availability  # noqa: E402,F401
from .location import Location  # noqa: E402,F401
from .message import Message  # noqa: E402,F401
from .notification import Notification  # noqa: E402,F401
from .organization import Organization  # noqa: E402,F401
from .shift import Shift  # noqa: E402,F401
from .swap_request import ShiftSwapRequest  # noqa: E402,F401
from .time_off import TimeOffRequest  # noqa: E402,F401
from .user import User  # noqa: E402,F401
