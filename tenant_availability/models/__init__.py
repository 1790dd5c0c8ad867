from tenant_availability.models.user import User, UserPublic
from tenant_availability.models.business_hours import (
    BusinessHours,
    BusinessHoursException,
    BusinessHoursExceptionIn,
    BusinessHoursExceptionPublic,
    BusinessHoursIn,
    BusinessHoursPublic,
)
from tenant_availability.models.appointment_settings import (
    AppointmentSettings,
    AppointmentSettingsIn,
    AppointmentSettingsPublic,
    AppointmentType,
    AppointmentTypeIn,
    AppointmentTypePublic,
)
from tenant_availability.models.appointment import Appointment

__all__ = [
    "User",
    "UserPublic",
    "BusinessHours",
    "BusinessHoursException",
    "BusinessHoursExceptionIn",
    "BusinessHoursExceptionPublic",
    "BusinessHoursIn",
    "BusinessHoursPublic",
    "AppointmentSettings",
    "AppointmentSettingsIn",
    "AppointmentSettingsPublic",
    "AppointmentType",
    "AppointmentTypeIn",
    "AppointmentTypePublic",
    "Appointment",
]
