CATEGORY_KEYWORDS = (
    ('Wellness', ('spa', 'massage', 'wellness')),
    ('Beauty', ('salon', 'hair', 'beauty', 'nail')),
    ('Fitness', ('gym', 'fitness', 'training')),
)
DEFAULT_CATEGORY = 'Other'


def determine_category(name: str, description: str | None = None) -> str:
    """Guess a listing category from keywords in the business name or description."""
    name = (name or '').lower()
    description = (description or '').lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name or keyword in description for keyword in keywords):
            return category

    return DEFAULT_CATEGORY
