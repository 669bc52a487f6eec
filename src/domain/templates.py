"""Suggested budget categories seeded when an event is created."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryTemplate:
    """Pre-defined category suggested for an event type."""

    id: str
    name: str
    icon: str
    color: str
    description: str


def _t(template_id: str, name: str, icon: str, color: str, description: str):
    return CategoryTemplate(template_id, name, icon, color, description)


CATEGORY_TEMPLATES: dict[str, tuple[CategoryTemplate, ...]] = {
    "wedding": (
        _t("wedding-venue", "Venue & Reception", "🏛️", "#059669",
           "Ceremony and reception venue rental fees"),
        _t("wedding-catering", "Catering & Beverages", "🍰", "#DC2626",
           "Food, drinks, cake, and catering services"),
        _t("wedding-photography", "Photography & Video", "📸", "#2563EB",
           "Professional photography and videography services"),
        _t("wedding-attire", "Attire", "👗", "#9333EA",
           "Wedding dress, suit, accessories, and alterations"),
        _t("wedding-flowers", "Flowers & Decorations", "💐", "#DB2777",
           "Floral arrangements, centerpieces, and decorations"),
        _t("wedding-entertainment", "Music & Entertainment", "🎵", "#EA580C",
           "DJ, band, or other entertainment services"),
    ),
    "graduation": (
        _t("graduation-venue", "Venue Rental", "🏛️", "#059669",
           "Space rental for graduation celebration"),
        _t("graduation-catering", "Food & Catering", "🍕", "#DC2626",
           "Meals, snacks, and catering services"),
        _t("graduation-decorations", "Decorations & Theme", "🎓", "#2563EB",
           "Graduation-themed decorations and setup"),
        _t("graduation-photography", "Photography", "📸", "#9333EA",
           "Professional photos and photo booth"),
        _t("graduation-invitations", "Invitations & Printing", "✉️",
           "#DB2777", "Invitations, programs, and printed materials"),
        _t("graduation-entertainment", "Entertainment & Music", "🎵",
           "#EA580C", "Music, entertainment, and activities"),
    ),
    "birthday": (
        _t("birthday-venue", "Venue & Space", "🏠", "#059669",
           "Party venue or space rental"),
        _t("birthday-catering", "Catering & Cake", "🎂", "#DC2626",
           "Food, drinks, and birthday cake"),
        _t("birthday-decorations", "Decorations", "🎈", "#2563EB",
           "Balloons, banners, and party decorations"),
        _t("birthday-gifts", "Gifts & Surprises", "🎁", "#9333EA",
           "Gifts, party favors, and surprises"),
        _t("birthday-entertainment", "Entertainment", "🎪", "#EA580C",
           "Entertainers, activities, and games"),
        _t("birthday-photography", "Photography", "📸", "#DB2777",
           "Professional photos and memories"),
    ),
    "anniversary": (
        _t("anniversary-venue", "Venue & Reception", "🏛️", "#059669",
           "Celebration venue and reception space"),
        _t("anniversary-catering", "Catering", "🍽️", "#DC2626",
           "Food, drinks, and catering services"),
        _t("anniversary-photography", "Photography & Video", "📸", "#2563EB",
           "Professional photos and videography"),
        _t("anniversary-flowers", "Flowers & Decorations", "💐", "#DB2777",
           "Floral arrangements and decorations"),
        _t("anniversary-entertainment", "Entertainment", "🎵", "#EA580C",
           "Music and entertainment services"),
    ),
    "baby-shower": (
        _t("babyshower-venue", "Venue & Setup", "🏠", "#059669",
           "Party venue and setup costs"),
        _t("babyshower-catering", "Food & Refreshments", "🍰", "#DC2626",
           "Food, drinks, and desserts"),
        _t("babyshower-decorations", "Decorations & Theme", "🎈", "#2563EB",
           "Baby shower themed decorations"),
        _t("babyshower-games", "Games & Activities", "🎮", "#9333EA",
           "Games, activities, and entertainment"),
        _t("babyshower-favors", "Gifts & Favors", "🎁", "#DB2777",
           "Party favors and thank you gifts"),
    ),
    "retirement": (
        _t("retirement-venue", "Venue Rental", "🏛️", "#059669",
           "Celebration venue rental"),
        _t("retirement-catering", "Catering", "🍽️", "#DC2626",
           "Food and beverage services"),
        _t("retirement-decorations", "Decorations", "🎈", "#2563EB",
           "Retirement themed decorations"),
        _t("retirement-gifts", "Gifts & Awards", "🎁", "#9333EA",
           "Retirement gifts and awards"),
        _t("retirement-entertainment", "Entertainment", "🎵", "#EA580C",
           "Music and entertainment"),
    ),
    "other": (
        _t("generic-venue", "Venue", "🏛️", "#059669",
           "Event venue and space rental"),
        _t("generic-catering", "Catering", "🍽️", "#DC2626",
           "Food and beverage services"),
        _t("generic-entertainment", "Entertainment", "🎵", "#2563EB",
           "Entertainment and activities"),
        _t("generic-decorations", "Decorations", "🎈", "#9333EA",
           "Event decorations and setup"),
        _t("generic-supplies", "Supplies", "📦", "#EA580C",
           "General event supplies"),
        _t("generic-miscellaneous", "Miscellaneous", "📝", "#DB2777",
           "Other event expenses"),
    ),
}


def get_category_templates(event_type: str) -> tuple[CategoryTemplate, ...]:
    """Return the templates for an event type, falling back to generic ones."""
    return CATEGORY_TEMPLATES.get(event_type, CATEGORY_TEMPLATES["other"])


def get_category_template_by_id(template_id: str) -> CategoryTemplate | None:
    """Return the template with the given id across all event types."""
    for templates in CATEGORY_TEMPLATES.values():
        for template in templates:
            if template.id == template_id:
                return template
    return None


__all__ = [
    "CategoryTemplate",
    "CATEGORY_TEMPLATES",
    "get_category_templates",
    "get_category_template_by_id",
]
