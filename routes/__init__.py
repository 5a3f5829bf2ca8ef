from .health import health_bp
from .auth import auth_bp
from .admin import admin_bp
from .booking import booking_bp
from .schedule import schedule_bp
from .plans import plans_bp
