# advisor_booking/services/template_service.py
"""
Template rendering for notification emails using Jinja2.
"""

from datetime import datetime
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from ..core.config import settings
from ..core.exceptions import NotificationFailure

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def format_date(value: datetime, format_str: str = "%d/%m/%Y") -> str:
    if isinstance(value, str):
        return value  # Already formatted
    return value.strftime(format_str)


def format_time(value: datetime, format_str: str = "%H:%M") -> str:
    if isinstance(value, str):
        return value  # Already formatted
    return value.strftime(format_str)


class TemplateService:
    """Renders templates from the package ``templates`` directory."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir or TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["format_date"] = format_date
        self.env.filters["format_time"] = format_time

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "app_name": settings.from_name,
            "current_year": datetime.now().year,
        }

    def render(self, template_name: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render ``template_name`` with the common context merged under ``context``.

        Raises:
            NotificationFailure: if the template does not exist or fails to render
        """
        full_context = self.get_common_context()
        full_context.update(context or {})
        try:
            return self.env.get_template(template_name).render(**full_context)
        except TemplateNotFound as exc:
            logger.error("Email template not found: %s", template_name)
            raise NotificationFailure(f"Template not found: {template_name}") from exc
