"""
Content-type pipelines.

Importing this package registers every pipeline in PIPELINE_REGISTRY.
"""

from .events import EventsPipeline
from .news import NewsPipeline
from .notices import NoticesPipeline

__all__ = ["EventsPipeline", "NewsPipeline", "NoticesPipeline"]
