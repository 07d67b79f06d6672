"""
Voice Agent Demo Builder - Industry Defaults
Starting services, tone, after-hours goal and hours per industry option
"""
from typing import Dict

from demo_builder.models.client import AfterHoursGoal, Tone, BusinessHours


def _defaults(services, tone, goal, weekday, weekend):
    return {
        "services": services,
        "tone": tone,
        "after_hours_goal": goal,
        "hours": BusinessHours(weekday=weekday, weekend=weekend, timezone="America/New_York"),
    }


INDUSTRY_DEFAULTS: Dict[str, dict] = {
    "HVAC": _defaults(
        ["AC Repair", "Heating Service", "HVAC Maintenance", "Emergency Service", "Installation"],
        Tone.PROFESSIONAL, AfterHoursGoal.EMERGENCY_TRANSFER, "8:00 AM - 6:00 PM", "Emergency Only"),
    "Plumbing": _defaults(
        ["Drain Cleaning", "Pipe Repair", "Water Heater", "Emergency Plumbing", "Leak Detection"],
        Tone.FRIENDLY, AfterHoursGoal.EMERGENCY_TRANSFER, "8:00 AM - 5:00 PM", "Emergency Only"),
    "Electrical": _defaults(
        ["Electrical Repair", "Panel Upgrades", "Outlet Installation", "Lighting", "Emergency Service"],
        Tone.PROFESSIONAL, AfterHoursGoal.EMERGENCY_TRANSFER, "8:00 AM - 5:00 PM", "Emergency Only"),
    "Roofing": _defaults(
        ["Roof Repair", "Roof Replacement", "Inspections", "Gutter Service", "Storm Damage"],
        Tone.PROFESSIONAL, AfterHoursGoal.LEAD_CAPTURE, "7:00 AM - 5:00 PM", "Closed"),
    "Landscaping": _defaults(
        ["Lawn Care", "Tree Service", "Landscape Design", "Irrigation", "Seasonal Cleanup"],
        Tone.FRIENDLY, AfterHoursGoal.LEAD_CAPTURE, "7:00 AM - 6:00 PM", "8:00 AM - 2:00 PM"),
    "Cleaning Services": _defaults(
        ["House Cleaning", "Deep Cleaning", "Move-In/Out", "Office Cleaning", "Recurring Service"],
        Tone.FRIENDLY, AfterHoursGoal.LEAD_CAPTURE, "8:00 AM - 6:00 PM", "9:00 AM - 3:00 PM"),
    "Auto Repair": _defaults(
        ["Oil Change", "Brake Service", "Engine Repair", "Diagnostics", "Tire Service"],
        Tone.FRIENDLY, AfterHoursGoal.VOICEMAIL, "8:00 AM - 6:00 PM", "9:00 AM - 3:00 PM"),
    "Medical/Dental": _defaults(
        ["Appointments", "Check-ups", "Emergency Care", "Consultations", "Follow-ups"],
        Tone.PROFESSIONAL, AfterHoursGoal.EMERGENCY_TRANSFER, "8:00 AM - 5:00 PM", "Closed"),
    "Legal Services": _defaults(
        ["Consultations", "Case Review", "Document Preparation", "Court Representation", "Legal Advice"],
        Tone.FORMAL, AfterHoursGoal.VOICEMAIL, "9:00 AM - 5:00 PM", "Closed"),
    "Real Estate": _defaults(
        ["Property Listings", "Buyer Consultation", "Seller Consultation", "Market Analysis", "Open Houses"],
        Tone.FRIENDLY, AfterHoursGoal.LEAD_CAPTURE, "9:00 AM - 7:00 PM", "10:00 AM - 4:00 PM"),
    "Restaurant": _defaults(
        ["Reservations", "Takeout Orders", "Catering Inquiries", "Event Booking", "Menu Questions"],
        Tone.FRIENDLY, AfterHoursGoal.VOICEMAIL, "11:00 AM - 10:00 PM", "11:00 AM - 11:00 PM"),
    "Salon/Spa": _defaults(
        ["Haircuts", "Coloring", "Spa Treatments", "Nails", "Appointments"],
        Tone.FRIENDLY, AfterHoursGoal.LEAD_CAPTURE, "9:00 AM - 7:00 PM", "9:00 AM - 5:00 PM"),
    "Fitness": _defaults(
        ["Membership Inquiries", "Class Schedules", "Personal Training", "Tours", "Billing Questions"],
        Tone.FRIENDLY, AfterHoursGoal.LEAD_CAPTURE, "5:00 AM - 10:00 PM", "7:00 AM - 8:00 PM"),
    "Pet Services": _defaults(
        ["Grooming", "Boarding", "Daycare", "Veterinary Appointments", "Pet Sitting"],
        Tone.FRIENDLY, AfterHoursGoal.EMERGENCY_TRANSFER, "7:00 AM - 7:00 PM", "8:00 AM - 5:00 PM"),
    "Home Services": _defaults(
        ["General Repairs", "Handyman Services", "Installations", "Maintenance", "Estimates"],
        Tone.FRIENDLY, AfterHoursGoal.LEAD_CAPTURE, "8:00 AM - 6:00 PM", "9:00 AM - 3:00 PM"),
    "Professional Services": _defaults(
        ["Consultations", "Project Inquiries", "Quotes", "Support", "General Questions"],
        Tone.PROFESSIONAL, AfterHoursGoal.VOICEMAIL, "9:00 AM - 5:00 PM", "Closed"),
    "Retail": _defaults(
        ["Product Inquiries", "Order Status", "Returns", "Store Hours", "Availability"],
        Tone.FRIENDLY, AfterHoursGoal.VOICEMAIL, "10:00 AM - 8:00 PM", "10:00 AM - 6:00 PM"),
    "Other": _defaults(
        ["General Inquiries", "Appointments", "Information", "Support", "Callback Request"],
        Tone.PROFESSIONAL, AfterHoursGoal.LEAD_CAPTURE, "9:00 AM - 5:00 PM", "Closed"),
}


def get_industry_defaults(industry: str) -> dict:
    """Defaults for an industry option, falling back to "Other" """
    defaults = INDUSTRY_DEFAULTS.get(industry) or INDUSTRY_DEFAULTS["Other"]
    # Fresh copies so callers can mutate what they get back
    hours = defaults["hours"]
    return {
        "services": list(defaults["services"]),
        "tone": defaults["tone"],
        "after_hours_goal": defaults["after_hours_goal"],
        "hours": BusinessHours(weekday=hours.weekday, weekend=hours.weekend, timezone=hours.timezone),
    }
