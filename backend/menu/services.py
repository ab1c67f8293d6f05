from core_backend.exceptions import NotFoundError
from .models import Dish


class CatalogService:
    """Read-only dish lookups used by the order engine."""

    @staticmethod
    def get_dish(dish_id) -> Dish:
        try:
            return Dish.objects.get(id=dish_id)
        except (Dish.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Dish not found: {dish_id}")

    @staticmethod
    def get_dishes(dish_ids) -> dict:
        """
        Fetch several dishes in one query, keyed by id.

        Raises NotFoundError naming the first id that does not exist.
        """
        dishes = Dish.objects.in_bulk(set(dish_ids))
        for dish_id in dish_ids:
            if dish_id not in dishes:
                raise NotFoundError(f"Dish not found: {dish_id}")
        return dishes

    @staticmethod
    def count_dishes() -> int:
        return Dish.objects.count()
