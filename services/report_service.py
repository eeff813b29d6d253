import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def format_time(value: Optional[datetime]) -> str:
    """09:00 AM"""
    return value.strftime("%I:%M %p") if value else "-"


def format_letter_date(value: date) -> str:
    """18 October 2026"""
    return f"{value.day} {value:%B %Y}"


class ReportService:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        # template environment
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["time12"] = format_time

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """render a template to HTML"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML -> PDF"""
        # imported on use: WeasyPrint loads pango/cairo at import time
        import weasyprint

        base_url = settings.WEASYPRINT_FONT_DIR or str(TEMPLATE_DIR)
        return weasyprint.HTML(string=html_content, base_url=base_url).write_pdf()

    def _letter(self, today: date) -> Dict[str, Any]:
        return {
            "org_name": settings.REPORT_ORG_NAME,
            "from_address": settings.REPORT_FROM_ADDRESS,
            "to_address": settings.REPORT_TO_ADDRESS,
            "subject": settings.REPORT_SUBJECT,
            "salutation": settings.REPORT_SALUTATION,
            "letter_date": format_letter_date(today),
        }

    def render_approved(self, requests: Iterable, today: Optional[date] = None) -> str:
        """Permission letter + table of approved OD requests"""
        today = today or date.today()
        data = self._letter(today)
        data["requests"] = list(requests)
        return self._render_template("approved_report.html", data)

    def generate_approved_pdf(self, requests: Iterable, today: Optional[date] = None) -> bytes:
        html = self.render_approved(requests, today)
        logger.info("Rendering approved OD report to PDF")
        return self._html_to_pdf(html)

    def render_stayback(self, stayback) -> str:
        """Thank-you page + participant table for one stayback"""
        return self._render_template("stayback_report.html", {
            "stayback": stayback,
            "stayback_date": format_letter_date(stayback.date_group.date),
            "students": list(stayback.students),
        })


report_service = ReportService()
