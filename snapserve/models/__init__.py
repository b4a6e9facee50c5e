from .user import User, UserRole
from .restaurant import Restaurant, BusinessHours, CuisineType, ServiceType, DayOfWeek
from .verification_token import VerificationToken, VerificationTokenType
from .invitation import StaffInvitation, StaffMember, InvitationStatus, StaffRole
from .table import Table
from .menu import Category, MenuItem
from .order import Order, OrderItem, OrderStatus, PaymentStatus
