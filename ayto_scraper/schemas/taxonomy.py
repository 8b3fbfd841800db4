"""Fixed category taxonomy for municipal notices."""

from enum import Enum


class NoticeCategory(str, Enum):
    """Categories a notice can be filed under."""

    TRAFFIC = "Tráfico"
    SUPPLIES = "Suministros"
    INFRASTRUCTURE = "Infraestructuras"
    UNCATEGORIZED = "Sin categoría"


DEFAULT_CATEGORY = NoticeCategory.UNCATEGORIZED.value
