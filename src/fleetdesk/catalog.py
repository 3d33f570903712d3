"""Static catalog data: vehicle form choices and the marketing content."""

from __future__ import annotations

from dataclasses import dataclass

VEHICLE_TYPES: tuple[str, ...] = (
    "Sedan",
    "SUV",
    "Truck",
    "Van",
    "Coupe",
    "Hatchback",
    "Convertible",
    "Wagon",
    "Minivan",
    "Pickup",
    "Crossover",
    "Sports Car",
    "Electric",
    "Hybrid",
    "Luxury",
    "Compact",
    "Mid-size",
    "Full-size",
    "Off-road",
    "Commercial",
)

MODELS_BY_MANUFACTURER: dict[str, tuple[str, ...]] = {
    "Toyota": ("Corolla", "Camry", "Prius", "RAV4", "Highlander"),
    "Ford": ("F-150", "Mustang", "Explorer", "Escape", "Focus"),
    "Chevrolet": ("Silverado", "Equinox", "Malibu", "Tahoe", "Camaro"),
    "Honda": ("Civic", "Accord", "CR-V", "Pilot", "Odyssey"),
    "Nissan": ("Altima", "Rogue", "Sentra", "Maxima", "Pathfinder"),
    "BMW": ("3 Series", "5 Series", "X3", "X5", "i8"),
    "Mercedes-Benz": ("C-Class", "E-Class", "S-Class", "GLC", "GLE"),
    "Audi": ("A4", "A6", "Q5", "Q7", "R8"),
    "Volkswagen": ("Golf", "Jetta", "Passat", "Tiguan", "Atlas"),
    "Hyundai": ("Elantra", "Sonata", "Tucson", "Santa Fe", "Kona"),
    "Kia": ("Soul", "Optima", "Sorento", "Sportage", "Telluride"),
    "Subaru": ("Outback", "Forester", "Impreza", "Crosstrek", "Ascent"),
    "Mazda": ("Mazda3", "Mazda6", "CX-5", "CX-9", "MX-5 Miata"),
    "Lexus": ("ES", "RX", "NX", "LS", "GX"),
    "Jeep": ("Wrangler", "Grand Cherokee", "Cherokee", "Compass", "Renegade"),
    "Tesla": ("Model S", "Model 3", "Model X", "Model Y", "Cybertruck"),
    "Porsche": ("911", "Cayenne", "Panamera", "Macan", "Taycan"),
    "Volvo": ("XC90", "XC60", "S90", "V90", "XC40"),
    "Land Rover": ("Range Rover", "Discovery", "Defender", "Evoque", "Velar"),
    "Jaguar": ("F-PACE", "XE", "XF", "E-PACE", "I-PACE"),
}

MANUFACTURERS: tuple[str, ...] = tuple(MODELS_BY_MANUFACTURER)

TICKET_PRIORITIES: tuple[str, ...] = ("Low", "Medium", "High")


def models_for(manufacturer: str | None) -> tuple[str, ...]:
    """Models offered for *manufacturer*; empty for unknown or no manufacturer."""
    if not manufacturer:
        return ()
    return MODELS_BY_MANUFACTURER.get(manufacturer, ())


@dataclass(frozen=True)
class PricingTier:
    id: str
    name: str
    price_monthly: str
    description: str
    features: tuple[str, ...]


@dataclass(frozen=True)
class Feature:
    title: str
    description: str


PRICING_TIERS: tuple[PricingTier, ...] = (
    PricingTier(
        id="tier-starter",
        name="Starter",
        price_monthly="$99",
        description="Perfect for small fleets just getting started with management software.",
        features=(
            "Up to 10 vehicles",
            "Real-time GPS tracking",
            "Basic maintenance scheduling",
            "Fuel consumption tracking",
            "Email support",
        ),
    ),
    PricingTier(
        id="tier-professional",
        name="Professional",
        price_monthly="$199",
        description="Ideal for growing fleets with advanced management needs.",
        features=(
            "Up to 50 vehicles",
            "Advanced analytics dashboard",
            "Driver safety monitoring",
            "Automated maintenance alerts",
            "Route optimization",
            "Priority email and phone support",
        ),
    ),
    PricingTier(
        id="tier-enterprise",
        name="Enterprise",
        price_monthly="Custom",
        description="Tailored solutions for large fleets with complex requirements.",
        features=(
            "Unlimited vehicles",
            "Custom integrations",
            "Advanced reporting and analytics",
            "Dedicated account manager",
            "API access",
            "24/7 premium support",
        ),
    ),
)

FEATURES: tuple[Feature, ...] = (
    Feature(
        "Real-time GPS Tracking",
        "Track your vehicles in real-time, optimize routes, and improve response times.",
    ),
    Feature(
        "Advanced Analytics",
        "Gain insights into your fleet's performance with detailed reports and analytics.",
    ),
    Feature(
        "Maintenance Scheduling",
        "Automate maintenance schedules to keep your fleet in top condition and reduce downtime.",
    ),
    Feature(
        "Driver Safety Monitoring",
        "Monitor driver behavior and promote safe driving practices to reduce accidents and liability.",
    ),
    Feature(
        "Fuel Management",
        "Optimize fuel consumption and reduce costs with fuel usage tracking.",
    ),
    Feature(
        "Cost Tracking and Reporting",
        "Keep track of all fleet-related expenses and generate comprehensive reports.",
    ),
)


def pricing_tier(tier_id: str) -> PricingTier:
    for tier in PRICING_TIERS:
        if tier.id == tier_id:
            return tier
    raise KeyError(tier_id)
