"""Category domain service."""

from typing import TYPE_CHECKING, Optional, Union

import structlog

from moneytrack.domain.entities import Category as CategoryEntity
from moneytrack.domain.entities import CategoryType
from moneytrack.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_delete_blocked,
    category_not_found,
)

if TYPE_CHECKING:
    from moneytrack.database.base import Database

logger = structlog.get_logger(__name__)

# (name, icon, color)
DEFAULT_EXPENSE_CATEGORIES = (
    ("Groceries", "local-grocery-store", "#4CAF50"),
    ("Food & Dining", "restaurant", "#FF6B6B"),
    ("Gas", "local-gas-station", "#FF9800"),
    ("Transportation", "directions-car", "#4ECDC4"),
    ("Housing", "home", "#45B7D1"),
    ("Utilities", "flash-on", "#96CEB4"),
    ("Entertainment", "movie", "#DDA0DD"),
    ("Shopping", "shopping-bag", "#F7DC6F"),
    ("Health", "favorite", "#FF69B4"),
    ("Personal", "person", "#87CEEB"),
    ("Education", "school", "#98D8C8"),
    ("Subscriptions", "subscriptions", "#C9B1FF"),
    ("Other", "more-horiz", "#BDC3C7"),
)

DEFAULT_INCOME_CATEGORIES = (
    ("Salary", "work", "#2ECC71"),
    ("Freelance", "laptop", "#3498DB"),
    ("Investment", "trending-up", "#9B59B6"),
    ("Gift", "card-giftcard", "#E74C3C"),
    ("Refund", "replay", "#1ABC9C"),
    ("Other", "more-horiz", "#95A5A6"),
)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: "Database"):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def seed_defaults(self, owner_id: str) -> int:
        """Create the default categories for an owner who has none yet.

        Returns:
            Number of categories created (0 if the owner already had some)
        """
        if self.db.list_categories(owner_id):
            return 0

        created = 0
        with self.db.atomic():
            for category_type, defaults in (
                (CategoryType.EXPENSE, DEFAULT_EXPENSE_CATEGORIES),
                (CategoryType.INCOME, DEFAULT_INCOME_CATEGORIES),
            ):
                for name, icon, color in defaults:
                    self.db.create_category(
                        owner_id=owner_id,
                        name=name,
                        category_type=category_type.value,
                        icon=icon,
                        color=color,
                        is_default=True,
                    )
                    created += 1

        logger.info("default_categories_seeded", owner_id=owner_id, count=created)
        return created

    def create_category(
        self,
        owner_id: str,
        name: str,
        category_type: Union[CategoryType, str],
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CategoryEntity:
        """Create a category.

        Args:
            owner_id: Owning user
            name: Category name
            category_type: expense or income
            icon: Optional display icon
            color: Optional display color

        Returns:
            The stored category

        Raises:
            ValidationError: If the name is empty or the type unknown
            ConflictError: If a category with the same name and type exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        try:
            category_type = CategoryType(category_type)
        except ValueError:
            raise ValidationError(f"Unknown category type '{category_type}'")

        for existing in self.db.list_categories(owner_id, category_type=category_type.value):
            if existing.name.lower() == name.lower():
                raise ConflictError(
                    f"Category '{name}' already exists for {category_type.value}"
                )

        category_id = self.db.create_category(
            owner_id=owner_id,
            name=name,
            category_type=category_type.value,
            icon=icon,
            color=color,
        )
        return self.db.get_category(category_id)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def find_category(
        self, owner_id: str, name: str, category_type: Optional[Union[CategoryType, str]] = None
    ) -> Optional[CategoryEntity]:
        """Look up a category by name (case-insensitive)."""
        type_value = CategoryType(category_type).value if category_type is not None else None
        for category in self.db.list_categories(owner_id, category_type=type_value):
            if category.name.lower() == name.strip().lower():
                return category
        return None

    def list_categories(
        self, owner_id: str, category_type: Optional[Union[CategoryType, str]] = None
    ) -> list[CategoryEntity]:
        """List an owner's categories ordered by type then name."""
        type_value = CategoryType(category_type).value if category_type is not None else None
        return self.db.list_categories(owner_id, category_type=type_value)

    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CategoryEntity:
        """Update category display fields.

        Raises:
            NotFoundError: If category doesn't exist
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        if name is not None and not name.strip():
            raise ValidationError("Category name cannot be empty")
        self.db.update_category(
            category_id,
            name=name.strip() if name is not None else None,
            icon=icon,
            color=color,
        )
        return self.db.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        """Delete a category.

        Args:
            category_id: Category ID to delete

        Raises:
            NotFoundError: If category doesn't exist
            DependencyError: If the category is a default or still referenced
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if category.is_default:
            raise DependencyError(category_delete_blocked(category_id, "default categories cannot be deleted"))

        usage = self.db.get_category_usage(category_id)
        in_use = [f"{count} {kind}" for kind, count in usage.items() if count > 0]
        if in_use:
            raise DependencyError(category_delete_blocked(category_id, f"used by {', '.join(in_use)}"))

        self.db.delete_category(category_id)
        logger.info("category_deleted", category_id=category_id)
