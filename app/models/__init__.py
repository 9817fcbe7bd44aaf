from .base import Base

from .profile import Profile
from .user_role import UserRole, AppRole
from .affiliation import Affiliation
from .walk import Walk, WalkStatus
from .location import Location
from .admin_location import AdminLocation
from .qr_code import QrCode, QrCodeType, AdminQrCode
from .walker_profile import WalkerProfile
from .walk_request import WalkRequest, RequestStatus
from .walker_group import WalkerGroup, GroupMember
from .subscription import SubscriptionPlan, WalkerSubscription
