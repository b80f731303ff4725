"""
Editable home-page copy, stored as a single `siteContent/homePage` document.
"""
from pydantic import Field

from repairdesk.models.service_requests import CamelModel


COLLECTION = "siteContent"
HOME_PAGE_ID = "homePage"


class HeroContent(CamelModel):
    title: str = "Professional IT Services You Can Trust"
    subtitle: str = (
        "Expert computer repair, networking solutions, and IT support for homes and "
        "businesses. Fast, reliable, and professional service with 15+ years of experience."
    )


class TrustIndicators(CamelModel):
    customers: str = "500+"
    experience: str = "15+"
    success_rate: str = "98%"
    support: str = "24/7"


class ServicesContent(CamelModel):
    title: str = "Complete IT Solutions"
    subtitle: str = (
        "From computer repair to network setup, we provide comprehensive IT services for "
        "homes and businesses across all major brands and systems."
    )


class ContactAddress(CamelModel):
    line1: str = "Transport Nagar"
    line2: str = "Saharanpur"


class BusinessHours(CamelModel):
    weekdays: str = "Mon-Fri: 8AM-6PM"
    saturday: str = "Sat: 9AM-4PM"


class ContactContent(CamelModel):
    title: str = "Ready to Get Started?"
    subtitle: str = "Contact us today for fast, professional IT service. We're here to help!"
    phone: str = "+91 9634409988"
    whatsapp: str = "+91 9634409988"
    email: str = "satisfiedcomputers@gmail.com"
    address: ContactAddress = Field(default_factory=ContactAddress)
    hours: BusinessHours = Field(default_factory=BusinessHours)


class FooterContent(CamelModel):
    description: str = (
        "Professional IT services and computer repair with over 15 years of experience. "
        "Your satisfaction is our priority."
    )


class HomePageContent(CamelModel):
    """Every field defaults to the copy shipped with the site."""
    hero: HeroContent = Field(default_factory=HeroContent)
    trust_indicators: TrustIndicators = Field(default_factory=TrustIndicators)
    services: ServicesContent = Field(default_factory=ServicesContent)
    contact: ContactContent = Field(default_factory=ContactContent)
    footer: FooterContent = Field(default_factory=FooterContent)
