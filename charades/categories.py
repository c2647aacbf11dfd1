"""Category definitions and word selection."""
import logging
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from charades.config_loader import ConfigLoader
from charades.errors import EmptyCategory, InvalidInput, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Category:
    """A named group of candidate words."""

    name: str
    words: Sequence[str]
    emoji: str = "🎭"

    def __post_init__(self):
        name = (self.name or "").strip()
        if not name:
            raise InvalidInput("Category name cannot be blank")
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'words', tuple(self.words))

    def random_word(self, rng: Optional[random.Random] = None) -> str:
        """Pick a word uniformly at random. Repeats across draws are possible."""
        if not self.words:
            raise EmptyCategory(f"Category '{self.name}' has no words")
        return (rng or random).choice(self.words)

    def matches(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.casefold() == (name or "").strip().casefold()

    def __len__(self) -> int:
        return len(self.words)

    def __str__(self) -> str:
        return f"{self.emoji} {self.name}"


# Seeded when neither the caller nor categories.json supplies any
DEFAULT_CATEGORIES = (
    Category("Animals", ("dog", "cat", "elephant", "giraffe", "tiger"), "🐾"),
    Category("Movies", ("Titanic", "Avatar", "Inception", "Avengers", "The Matrix"), "🎬"),
    Category("Professions", ("doctor", "engineer", "firefighter", "pilot", "chef"), "🧑‍🔧"),
)


def load_categories() -> List[Category]:
    """Build the default category set from config, falling back to the built-ins."""
    categories = []
    for cat_data in ConfigLoader().get_categories():
        try:
            category = Category(
                name=cat_data['name'],
                words=cat_data.get('words', []),
                emoji=cat_data.get('emoji', "🎭"),
            )
        except (KeyError, TypeError, InvalidInput) as e:
            logger.warning("Skipping malformed category entry %r: %s", cat_data, e)
            continue
        if any(existing.matches(category.name) for existing in categories):
            logger.warning("Skipping duplicate category '%s'", category.name)
            continue
        categories.append(category)

    if not categories:
        logger.info("No categories configured, using built-in defaults")
        return list(DEFAULT_CATEGORIES)
    return categories


class CategoryManager:
    """Manages the active set of categories."""

    def __init__(self, categories: Optional[Iterable[Category]] = None):
        self.categories: List[Category] = []
        for category in (list(categories or []) or load_categories()):
            self.add(category)

    def add(self, category: Category) -> None:
        """Add a category. Names must be unique regardless of case."""
        if any(existing.matches(category.name) for existing in self.categories):
            raise InvalidInput(f"Duplicate category name '{category.name}'")
        self.categories.append(category)

    def find(self, name: str) -> Category:
        """Get category by name (case-insensitive)."""
        for category in self.categories:
            if category.matches(name):
                return category
        raise NotFound(f"Category '{name}' not found")

    def get_all(self) -> List[Category]:
        """Get all categories."""
        return list(self.categories)

    def names(self) -> List[str]:
        return [c.name for c in self.categories]

    def __iter__(self) -> Iterator[Category]:
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)
